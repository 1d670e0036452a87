from form_playground.engine.gateway import CredentialGateway, GatewayResult, SimulatedGateway
from form_playground.engine.playground import Playground
from form_playground.engine.session import FormSession, SubmitResult
from form_playground.engine.validator import FieldResult, FormResult, validate_field, validate_form

__all__ = [
    "CredentialGateway",
    "FieldResult",
    "FormResult",
    "FormSession",
    "GatewayResult",
    "Playground",
    "SimulatedGateway",
    "SubmitResult",
    "validate_field",
    "validate_form",
]
