"""Use cases do relay de formulários."""

from app.use_cases.relay.admission import AdmissionPipeline, AdmissionRequest, parse_client_timestamp

__all__ = ["AdmissionPipeline", "AdmissionRequest", "parse_client_timestamp"]
