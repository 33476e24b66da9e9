import logging
import time
import uuid

from flask import Flask, g, jsonify, request
from flask_restx import Api, Namespace, Resource

from config import Settings
from document_store import DocumentStore
from errors import ClinicError, StoreError
from graphql_api import init_graphql
from logging_helper import log_event, log_status, setup_logging
from models import Models
from services import ClinicService

PROCESS_PET_ERROR = "Erro ao processar pet"
PROCESS_APPOINTMENT_ERROR = "Erro ao processar agendamento"

# Namespaces: name -> (path under /api, description)
namespaces_config = {
    "pets": ("/pets", "Pets info"),
    "scheduling": ("/", "Appointments and service availability"),
    "store": ("/store", "Store catalog"),
    "purchase": ("/purchase", "Checkout"),
}


def _json_body() -> dict | None:
    return request.get_json(silent=True)


def register_pet_resources(ns, service: ClinicService, models: Models):
    """
    Registers:
      GET   /pets
      GET   /pets/<string:pet_id>
      POST  /pets/new
    """

    @ns.route('')
    class PetList(Resource):
        @ns.doc('list_pets')
        @ns.response(200, 'Every stored pet', [models.pet_model])
        def get(self):
            return service.list_pets()

    @ns.route('/<string:pet_id>')
    @ns.param('pet_id', 'The pet identifier')
    class PetItem(Resource):
        @ns.doc('get_pet')
        @ns.response(200, 'Pet found', models.pet_model)
        @ns.response(404, 'Pet not found', models.error_model)
        def get(self, pet_id):
            return service.get_pet(pet_id)

    @ns.route('/new')
    class PetCreate(Resource):
        @ns.doc('add_pet')
        @ns.expect(models.pet_model)
        @ns.response(201, 'Pet stored', models.pet_created_model)
        def post(self):
            try:
                return service.add_pet(_json_body()), 201
            except StoreError:
                return {"error": PROCESS_PET_ERROR}, 500


def register_scheduling_resources(ns, service: ClinicService, models: Models):
    """
    Registers:
      POST  /scheduleService
      GET   /appointments
      GET   /appointments/latest
      GET   /schedule/<string:service_id>
    """

    @ns.route('/scheduleService')
    class ScheduleService(Resource):
        @ns.doc('schedule_service')
        @ns.expect(models.schedule_request_model)
        @ns.response(201, 'Appointment booked', models.appointment_model)
        @ns.response(400, 'Missing field', models.error_model)
        @ns.response(409, 'Slot already taken for this pet', models.error_model)
        def post(self):
            try:
                return service.schedule_service(_json_body() or {}), 201
            except StoreError:
                return {"error": PROCESS_APPOINTMENT_ERROR}, 500

    @ns.route('/appointments')
    class AppointmentList(Resource):
        @ns.doc('list_appointments')
        @ns.response(200, 'Appointments with pet names', [models.appointment_listing_model])
        def get(self):
            return service.list_appointments()

    @ns.route('/appointments/latest')
    class LatestAppointment(Resource):
        @ns.doc('latest_appointment')
        @ns.response(200, 'Most recently booked appointment', models.appointment_model)
        @ns.response(404, 'Nothing booked yet', models.error_model)
        def get(self):
            return service.latest_appointment()

    @ns.route('/schedule/<string:service_id>')
    @ns.param('service_id', 'The service identifier')
    class ScheduleItem(Resource):
        @ns.doc('get_schedule')
        @ns.response(404, 'Service availability not found', models.error_model)
        def get(self, service_id):
            return service.get_schedule(service_id)


def register_store_resources(store_ns, purchase_ns, service: ClinicService, models: Models):
    @store_ns.route('/products')
    class ProductList(Resource):
        @store_ns.doc('list_products')
        def get(self):
            return service.list_products()

    @purchase_ns.route('')
    class Purchase(Resource):
        @purchase_ns.doc('purchase')
        @purchase_ns.expect(models.purchase_request_model)
        @purchase_ns.response(201, 'Purchase confirmed', models.purchase_model)
        @purchase_ns.response(400, 'Missing field', models.error_model)
        def post(self):
            return service.purchase(_json_body() or {}), 201


def create_app(settings: Settings | None = None) -> Flask:
    settings = settings or Settings.from_env()
    setup_logging(settings)

    app = Flask(__name__)
    app.config["SETTINGS"] = settings
    # error bodies are exactly {"error": ...}
    app.config["ERROR_INCLUDE_MESSAGE"] = False
    app.config["RESTX_ERROR_404_HELP"] = False
    api = Api(app, version='1.0', title='Pet Clinic API',
              description='Mock pet clinic and pet shop backed by JSON files',
              prefix='/api', doc='/docs')

    store = DocumentStore(settings.data_dir)
    service = ClinicService(store, settings)
    app.extensions["clinic_service"] = service

    models = Models(api)

    namespaces = {}
    for name, (path, description) in namespaces_config.items():
        ns = Namespace(name, description=description, path=path)
        namespaces[name] = ns
        api.add_namespace(ns)

    register_pet_resources(namespaces["pets"], service, models)
    register_scheduling_resources(namespaces["scheduling"], service, models)
    register_store_resources(namespaces["store"], namespaces["purchase"], service, models)

    @api.errorhandler(ClinicError)
    def handle_clinic_error(error):
        if isinstance(error, StoreError):
            log_event("store_error", logging.ERROR, request_id=g.get("request_id"),
                      path=request.path, error=repr(error.__cause__ or error))
        return error.to_dict(), error.status_code

    @app.before_request
    def _start_request():
        g.request_id = (
            request.headers.get("X-Request-Id")
            or request.headers.get("X-Correlation-Id")
            or str(uuid.uuid4())
        )
        g.started = time.perf_counter()

    @app.after_request
    def _finish_request(response):
        response.headers["X-Request-Id"] = g.get("request_id", "")
        duration_ms = int((time.perf_counter() - g.get("started", time.perf_counter())) * 1000)
        log_event("http_request",
                  request_id=g.get("request_id"),
                  method=request.method,
                  path=request.path,
                  status=response.status_code,
                  duration_ms=duration_ms)
        return response

    @app.route('/health')
    def health_check():
        """Health check endpoint for CI/CD monitoring"""
        return jsonify({
            "status": "healthy",
            "service": "pet-clinic-api",
            "version": "1.0.0"
        }), 200

    init_graphql(app, service)
    return app


if __name__ == '__main__':
    settings = Settings.from_env()
    app = create_app(settings)
    log_status("good", "Mock server running", f" on port {settings.port}")
    app.run(debug=settings.debug, port=settings.port, threaded=True)
