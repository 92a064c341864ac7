from proposal_studio.schemas.generation import REQUIRED_FIELDS, DocumentForm
from proposal_studio.schemas.template import DocumentType


def test_defaults():
    form = DocumentForm()
    assert form.document_type == DocumentType.proposal
    assert form.include_financials is False
    assert form.include_timeline is True
    assert form.include_competitor_analysis is False
    assert form.resolve_template().id == "professional"


def test_empty_form_misses_every_required_field():
    assert DocumentForm().missing_required_fields() == list(REQUIRED_FIELDS)


def test_whitespace_counts_as_blank(acme_form):
    acme_form["budget"] = "   "
    acme_form["goals"] = None
    form = DocumentForm.model_validate(acme_form)
    assert form.missing_required_fields() == ["budget", "goals"]


def test_optional_fields_are_not_required(acme_form):
    form = DocumentForm.model_validate(acme_form)
    assert form.client_name == ""
    assert form.competitors == ""
    assert form.missing_required_fields() == []
    assert form.validation_errors() == {}


def test_validation_errors_use_wire_names(acme_form):
    del acme_form["targetMarket"]
    acme_form["companyName"] = ""
    errors = DocumentForm.model_validate(acme_form).validation_errors()
    assert set(errors) == {"companyName", "targetMarket"}


def test_template_from_other_catalogue_is_an_error(acme_form):
    form = DocumentForm.model_validate({**acme_form, "templateId": "startup"})
    assert form.resolve_template() is None
    assert "templateId" in form.validation_errors()


def test_template_id_read_from_posted_template_object(acme_form):
    form = DocumentForm.model_validate({**acme_form, "template": {"id": "creative", "name": "Creative"}})
    assert form.template_id == "creative"
    assert form.resolve_template().name == "Creative"


def test_switching_document_type_resets_template(acme_form):
    form = DocumentForm.model_validate({**acme_form, "templateId": "minimal"})
    switched = form.with_document_type("pitch-deck")
    assert switched.document_type == DocumentType.pitch_deck
    assert switched.template_id == "startup"
    assert switched.company_name == "Acme"
    # the source form is untouched
    assert form.template_id == "minimal"


def test_generation_request_carries_full_template(acme_form):
    acme_form["includeFinancials"] = True
    request = DocumentForm.model_validate({**acme_form, "templateId": "technical"}).to_generation_request()
    assert request.template.id == "technical"
    assert request.template.fonts.heading == "font-mono"
    assert request.include_financials is True
    assert request.project_description == "Widget SaaS"
