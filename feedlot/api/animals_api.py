# feedlot/api/animals_api.py
from flask import request, session
from flask_login import current_user, login_required
from flask_restx import Namespace, Resource, fields

from feedlot.exceptions import ResourceNotFoundError
from feedlot.helpers import format_currency
from feedlot.services.animal_finder import AnimalFinder, SelectionContext
from feedlot.services.death_service import DeathService
from feedlot.services.lifecycle_service import allowed_actions
from feedlot.services.realization_service import RealizationService
from feedlot.services.treatment_service import TreatmentService

ns = Namespace("animals", description="Find animals and record events against them")

SELECTION_KEY = 'animal_selection'

finder = AnimalFinder()
treatment_service = TreatmentService()
death_service = DeathService()
realization_service = RealizationService()

animal_model = ns.model("Animal", {
    "id": fields.String(readonly=True),
    "visual_tag": fields.String,
    "animal_eid": fields.String,
    "gender": fields.String,
    "days_on_feed": fields.Integer,
    "weeks_on_feed": fields.Integer,
    "days_to_ship": fields.Integer,
    "ltd_treatment_cost": fields.Float,
    "ltd_treatment_cost_display": fields.String(attribute=lambda a: format_currency(a.ltd_treatment_cost)),
    "pulls": fields.Integer,
    "re_pulls": fields.Integer,
    "re_treat": fields.Integer,
    "pen_id": fields.String,
    "lot_id": fields.String,
    "status": fields.String,
})

animal_detail_model = ns.inherit("AnimalDetail", animal_model, {
    "allowed_actions": fields.List(
        fields.String,
        attribute=lambda a: sorted(action.value for action in allowed_actions(a)),
    ),
})

treatment_input = ns.model("TreatmentInput", {
    "diagnosis_id": fields.String(required=True),
    "treatment_id": fields.String(required=True),
    "move_to": fields.String(required=True, description="Destination pen id"),
    "treatment_person": fields.String,
    "current_weight": fields.Float,
    "severity": fields.String(enum=["Critical", "Medium", "Low"], default="Medium"),
    "treatment_date": fields.Date,
})

death_input = ns.model("DeathInput", {
    "reason": fields.String(required=True),
    "necropsy": fields.Boolean(default=False),
    "death_date": fields.Date,
    "photo_url": fields.String,
})

realization_input = ns.model("RealizationInput", {
    "reason_id": fields.String(required=True, description="Diagnosis id"),
    "weight": fields.Float,
    "price": fields.Float,
    "realization_date": fields.Date,
})


def _selection():
    return SelectionContext.from_dict(session.get(SELECTION_KEY))


def _remember(context):
    session[SELECTION_KEY] = context.to_dict()


def _submitted_data():
    """JSON body, or form fields for multipart uploads."""
    if request.files or request.form:
        return request.form.to_dict()
    return request.get_json(silent=True) or {}


@ns.route("")
class AnimalList(Resource):

    @ns.doc(params={"lot_id": "Filter by lot", "pen_id": "Filter by pen (wins over lot)"})
    @ns.marshal_list_with(animal_model)
    def get(self):
        """List animals for the current lot/pen selection."""
        context = _selection()
        if "lot_id" in request.args:
            context.select_lot(request.args.get("lot_id"))
        if "pen_id" in request.args:
            context.select_pen(request.args.get("pen_id"))
        animals = finder.displayed_animals(context)
        _remember(context)
        return animals


@ns.route("/search")
class AnimalSearch(Resource):

    @ns.doc(params={"eid": "EID or EID fragment"})
    @ns.marshal_with(animal_detail_model)
    def get(self):
        """Find the best-matching animal by EID."""
        context = _selection()
        animal = finder.find_by_eid(request.args.get("eid"), context=context)
        _remember(context)
        return animal


@ns.route("/candidates")
class AnimalCandidates(Resource):

    @ns.doc(params={"eid": "EID or EID fragment"})
    @ns.marshal_list_with(animal_model)
    def get(self):
        """All animals whose EID contains the fragment, best match first."""
        return finder.search_by_eid(request.args.get("eid"))


@ns.route("/<string:animal_id>")
class AnimalItem(Resource):

    @ns.marshal_with(animal_detail_model)
    def get(self, animal_id):
        """Fetch a single animal and the actions it allows."""
        return finder.get_animal(animal_id)


@ns.route("/<string:animal_id>/treatments")
class AnimalTreatments(Resource):

    def get(self, animal_id):
        """Treatment history, newest first."""
        return [r.to_dict() for r in treatment_service.list_treatment_history(animal_id)]

    @ns.expect(treatment_input)
    @login_required
    def post(self, animal_id):
        """Record a treatment."""
        result = treatment_service.record(animal_id, _submitted_data(), recorded_by=current_user.display_name)
        return result.to_dict(), 201


@ns.route("/<string:animal_id>/death")
class AnimalDeathRecord(Resource):

    def get(self, animal_id):
        """Fetch the death record."""
        record = death_service.get_death_record(animal_id)
        if record is None:
            raise ResourceNotFoundError('Death record for animal', animal_id)
        return record.to_dict()

    @ns.expect(death_input)
    @login_required
    def put(self, animal_id):
        """Record a death, or amend the existing record. Accepts a 'photo' upload."""
        result = death_service.record(animal_id, _submitted_data(), photo=request.files.get("photo"))
        return result.to_dict(), 201 if result.created else 200


@ns.route("/<string:animal_id>/realization")
class AnimalRealizationRecord(Resource):

    def get(self, animal_id):
        """Fetch the realization record."""
        record = realization_service.get_realization_record(animal_id)
        if record is None:
            raise ResourceNotFoundError('Realization record for animal', animal_id)
        return record.to_dict()

    @ns.expect(realization_input)
    @login_required
    def post(self, animal_id):
        """Realize an animal. Repeating it returns the record on file."""
        result = realization_service.record(animal_id, _submitted_data())
        return result.to_dict(), 201 if result.created else 200
