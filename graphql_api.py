import functools
import logging
import time

from ariadne import MutationType, QueryType, ObjectType, ScalarType, graphql_sync, make_executable_schema
from flask import g, jsonify, request
from graphql import (
    GraphQLError,
    build_schema,
    find_breaking_changes,
    find_dangerous_changes,
    lexicographic_sort_schema,
    print_schema,
)

from errors import ClinicError, NotFoundError
from logging_helper import log_event

# ----------------------------
# GraphQL Playground (GET /graphql)
# ----------------------------
PLAYGROUND_HTML = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>Pet Clinic GraphQL</title>
    <style>
        body { height: 100vh; margin: 0; font-family: Arial, sans-serif; background-color: #1a1a1a; color: #fff; }
        #container { display: flex; height: 100vh; }
        .panel { flex: 1; display: flex; flex-direction: column; padding: 20px; }
        textarea, pre { flex: 1; background-color: #2d2d2d; color: #d4d4d4; border: 1px solid #3e3e3e; padding: 10px;
                        font-family: 'Courier New', monospace; font-size: 14px; }
        button { margin-top: 10px; padding: 10px 20px; background-color: #2a9d8f; color: white; border: none;
                 cursor: pointer; font-size: 16px; border-radius: 4px; }
        h2 { margin-top: 0; color: #2a9d8f; }
    </style>
</head>
<body>
    <div id="container">
        <div class="panel">
            <h2>Query</h2>
            <textarea id="query">query {
  appointments {
    petId
    petName
    date
    time
  }
}</textarea>
            <button onclick="run()">Run (Ctrl+Enter)</button>
        </div>
        <div class="panel">
            <h2>Response</h2>
            <pre id="response"></pre>
        </div>
    </div>
    <script>
        async function run() {
            const out = document.getElementById('response');
            try {
                const resp = await fetch('/graphql', {
                    method: 'POST',
                    headers: { 'Content-Type': 'application/json' },
                    body: JSON.stringify({ query: document.getElementById('query').value })
                });
                out.textContent = JSON.stringify(await resp.json(), null, 2);
            } catch (error) {
                out.textContent = 'Error: ' + error.message;
            }
        }
        document.getElementById('query').addEventListener('keydown', function(e) {
            if ((e.ctrlKey || e.metaKey) && e.key === 'Enter') run();
        });
    </script>
</body>
</html>
"""

type_defs = """
    scalar JSON

    type Pet {
        id: JSON
        name: String
        data: JSON!
    }

    type Appointment {
        petId: Int!
        serviceId: Int!
        date: String!
        time: String!
        clinicName: String
        clinicAddress: String
        clinicPhone: String
        petName: String
    }

    type Purchase {
        orderId: Int!
        cartItems: JSON
        status: String!
    }

    type Query {
        pets: [Pet!]!
        pet(id: Int!): Pet
        appointments: [Appointment!]!
        latestAppointment: Appointment
        schedule(serviceId: Int!): JSON
        products: JSON!
    }

    type Mutation {
        addPet(pet: JSON!): Pet!
        scheduleService(petId: Int!, serviceId: Int!, date: String!, time: String!): Appointment!
        purchase(products: JSON!, cartItems: JSON!, paymentData: JSON!): Purchase!
    }
"""

json_scalar = ScalarType("JSON")


@json_scalar.serializer
def serialize_json(value):
    return value


@json_scalar.value_parser
def parse_json_value(value):
    return value


query = QueryType()
mutation = MutationType()
pet_type = ObjectType("Pet")


@pet_type.field("data")
def resolve_pet_data(pet, info):
    return pet


def _service(info):
    return info.context["service"]


def _clinic_errors(resolver):
    """Re-raise ClinicError as a GraphQL error carrying the HTTP-equivalent code."""
    @functools.wraps(resolver)
    def wrapper(*args, **kwargs):
        try:
            return resolver(*args, **kwargs)
        except ClinicError as exc:
            raise GraphQLError(exc.message, extensions={"code": exc.status_code}) from exc
    return wrapper


def _or_none(call, *args):
    try:
        return call(*args)
    except NotFoundError:
        return None


# ----------------------------
# Query resolvers
# ----------------------------
@query.field("pets")
@_clinic_errors
def resolve_pets(_, info):
    return [p for p in _service(info).list_pets() if isinstance(p, dict)]


@query.field("pet")
@_clinic_errors
def resolve_pet(_, info, id):
    return _or_none(_service(info).get_pet, id)


@query.field("appointments")
@_clinic_errors
def resolve_appointments(_, info):
    return _service(info).list_appointments()


@query.field("latestAppointment")
@_clinic_errors
def resolve_latest_appointment(_, info):
    return _or_none(_service(info).latest_appointment)


@query.field("schedule")
@_clinic_errors
def resolve_schedule(_, info, serviceId):
    return _or_none(_service(info).get_schedule, serviceId)


@query.field("products")
@_clinic_errors
def resolve_products(_, info):
    return _service(info).list_products()


# ----------------------------
# Mutation resolvers
# ----------------------------
@mutation.field("addPet")
@_clinic_errors
def resolve_add_pet(_, info, pet):
    return _service(info).add_pet(pet)["pet"]


@mutation.field("scheduleService")
@_clinic_errors
def resolve_schedule_service(_, info, petId, serviceId, date, time):
    return _service(info).schedule_service(
        {"petId": petId, "serviceId": serviceId, "date": date, "time": time}
    )


@mutation.field("purchase")
@_clinic_errors
def resolve_purchase(_, info, products, cartItems, paymentData):
    return _service(info).purchase(
        {"products": products, "cartItems": cartItems, "paymentData": paymentData}
    )


schema = make_executable_schema(type_defs, query, mutation, pet_type, json_scalar)


def schema_sdl(graphql_schema=None) -> str:
    """SDL of the schema with types and fields in lexicographic order."""
    return print_schema(lexicographic_sort_schema(schema if graphql_schema is None else graphql_schema)).strip() + "\n"


def contract_changes(snapshot_sdl: str) -> list[str]:
    """
    Differences between the committed SDL snapshot and the live schema.

    Breaking and dangerous changes are listed by graphql-core; anything else
    that makes the two SDLs differ (new types or fields) is reported as one
    generic line. An empty list means the snapshot is current.
    """
    snapshot = build_schema(snapshot_sdl)
    if schema_sdl(snapshot) == schema_sdl():
        return []

    changes = [f"BREAKING {c.type.name}: {c.description}" for c in find_breaking_changes(snapshot, schema)]
    changes += [f"DANGEROUS {c.type.name}: {c.description}" for c in find_dangerous_changes(snapshot, schema)]
    return changes or ["schema has additions not in the snapshot"]


def _infer_operation_type(query_text: str | None) -> str:
    if not query_text:
        return "unknown"
    if query_text.lstrip().startswith("mutation"):
        return "mutation"
    # anonymous query often omits "query" keyword
    return "query"


def init_graphql(app, service):
    """
    Mount GET /graphql (playground) and POST /graphql on `app`.

    Logs one `graphql_request` event per call, plus `graphql_error` when the
    result carries errors. The request id comes from the app's before_request
    hook and is echoed back by its after_request hook.
    """

    @app.route("/graphql", methods=["GET"])
    def graphql_playground():
        return PLAYGROUND_HTML, 200

    @app.route("/graphql", methods=["POST"])
    def graphql_server():
        started = time.perf_counter()
        request_id = g.get("request_id")

        data = request.get_json(silent=True)
        if not data:
            log_event("graphql_request_invalid", logging.WARNING,
                      request_id=request_id, reason="no_data",
                      path=request.path, method=request.method)
            return jsonify({"error": "No data provided"}), 400

        operation_name = data.get("operationName") or "anonymous"
        operation_type = _infer_operation_type(data.get("query"))

        success, result = graphql_sync(
            schema,
            data,
            context_value={"request": request, "request_id": request_id, "service": service},
            debug=app.debug,
        )

        duration_ms = int((time.perf_counter() - started) * 1000)
        log_event("graphql_request",
                  request_id=request_id,
                  operation_name=operation_name,
                  operation_type=operation_type,
                  duration_ms=duration_ms,
                  status="success" if success else "failed")

        errors = (result or {}).get("errors") or []
        if errors:
            messages = [e.get("message") if isinstance(e, dict) else str(e) for e in errors]
            log_event("graphql_error", logging.ERROR,
                      request_id=request_id,
                      operation_name=operation_name,
                      operation_type=operation_type,
                      errors=[m for m in messages if m])

        return jsonify(result), (200 if success else 400)
