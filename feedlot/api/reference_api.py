# feedlot/api/reference_api.py
from flask_restx import Namespace, Resource, fields

from feedlot.services.reference_service import ReferenceService

ns = Namespace("reference", description="Form choices: diagnoses, treatments, reasons")

reference_service = ReferenceService()

diagnosis_model = ns.model("Diagnosis", {
    "id": fields.String(readonly=True),
    "name": fields.String,
})

treatment_model = ns.model("Treatment", {
    "id": fields.String(readonly=True),
    "name": fields.String,
    "diagnosis_ids": fields.List(fields.String),
})


@ns.route("/diagnoses")
class DiagnosisList(Resource):

    @ns.marshal_list_with(diagnosis_model)
    def get(self):
        """List diagnoses."""
        return reference_service.list_diagnoses()


@ns.route("/diagnoses/<string:diagnosis_id>/treatments")
class DiagnosisTreatments(Resource):

    @ns.marshal_list_with(treatment_model)
    def get(self, diagnosis_id):
        """Treatments applicable to a diagnosis."""
        return reference_service.list_treatments_for_diagnosis(diagnosis_id)


@ns.route("/realization-reasons")
class RealizationReasons(Resource):

    @ns.marshal_list_with(diagnosis_model)
    def get(self):
        """Reasons offered on the realize form."""
        return reference_service.list_realization_reasons()


@ns.route("/death-reasons")
class DeathReasons(Resource):

    def get(self):
        """Causes offered on the death form."""
        return [{"value": value, "label": label} for value, label in reference_service.death_reasons()]
