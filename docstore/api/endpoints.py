from flask import Response, current_app, make_response, request

from .interceptors import validate_input
from .responses import get_json_body, make_json_response
from .route import Method, app_route
from ..document.data_provider import DataProvider


PROVIDER_EXTENSION = "docstore_provider"

def get_provider() -> DataProvider:
    """ Returns the DataProvider attached to the current Flask app by create_app(). """
    return current_app.extensions[PROVIDER_EXTENSION]

# region: Records
@app_route("/collections/<collection>", methods=[Method.POST])
def create_record(collection: str) -> Response:
    body = get_json_body()
    validate_input(body)
    return make_json_response(get_provider().create(collection, body), 201)

@app_route("/collections/<collection>", methods=[Method.GET])
def query_records(collection: str) -> Response:
    parameters = request.args.to_dict(flat=False)
    return make_json_response(get_provider().query(collection, parameters))

@app_route("/collections/<collection>/<record_id>", methods=[Method.GET])
def get_record(collection: str, record_id: str) -> Response:
    return make_json_response(get_provider().get(collection, record_id))

@app_route("/collections/<collection>/<record_id>", methods=[Method.PUT])
def update_record(collection: str, record_id: str) -> Response:
    body = get_json_body()
    validate_input(body)
    return make_json_response(get_provider().update(collection, record_id, body))

@app_route("/collections/<collection>/<record_id>", methods=[Method.DELETE])
def delete_record(collection: str, record_id: str) -> Response:
    return make_json_response(get_provider().delete(collection, record_id))
# endregion

# region: Files
@app_route("/files", methods=[Method.POST])
def create_file() -> Response:
    # An explicit Content-Length of 0 means there is no body at all
    stream = None if request.content_length == 0 else request.stream
    return make_json_response(get_provider().create_file(stream), 201)

@app_route("/files/<file_id>", methods=[Method.GET])
def get_file(file_id: str) -> Response:
    content = get_provider().get_file(file_id)
    response = make_response(content, 200)
    response.mimetype = "application/octet-stream"
    return response
# endregion
