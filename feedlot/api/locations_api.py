# feedlot/api/locations_api.py
from flask_restx import Namespace, Resource, fields

from feedlot.services.animal_finder import AnimalFinder

ns_lots = Namespace("lots", description="Lots and the pens inside them")
ns_pens = Namespace("pens", description="Pens, including lot-independent ones")

finder = AnimalFinder()

lot_model = ns_lots.model("Lot", {
    "id": fields.String(readonly=True),
    "lot_number": fields.String,
})

pen_model = ns_pens.model("Pen", {
    "id": fields.String(readonly=True),
    "pen_number": fields.String,
    "lot_id": fields.String,
})

pen_detail_model = ns_pens.inherit("PenDetail", pen_model, {
    "lot": fields.Nested(lot_model, allow_null=True),
})


@ns_lots.route("")
class LotList(Resource):

    @ns_lots.marshal_list_with(lot_model)
    def get(self):
        """List all lots."""
        return finder.list_lots()


@ns_lots.route("/<string:lot_id>")
class LotItem(Resource):

    @ns_lots.marshal_with(lot_model)
    def get(self, lot_id):
        """Fetch a single lot."""
        return finder.get_lot(lot_id)


@ns_lots.route("/<string:lot_id>/pens")
class LotPens(Resource):

    @ns_lots.marshal_list_with(pen_model)
    def get(self, lot_id):
        """List the pens of a lot."""
        return finder.list_pens_for_lot(lot_id)


@ns_pens.route("")
class PenList(Resource):

    @ns_pens.marshal_list_with(pen_model)
    def get(self):
        """List every pen, for the treatment 'move to' choice."""
        return finder.list_pens()


@ns_pens.route("/<string:pen_id>")
class PenItem(Resource):

    @ns_pens.marshal_with(pen_detail_model)
    def get(self, pen_id):
        """Fetch a pen with the lot it belongs to."""
        pen = finder.get_pen(pen_id)
        return {
            "id": pen.id,
            "pen_number": pen.pen_number,
            "lot_id": pen.lot_id,
            "lot": finder.get_lot_for_pen(pen_id),
        }
