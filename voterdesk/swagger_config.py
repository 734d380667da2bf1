def swagger_template(app=None):
    title = "Voter Information API"
    version = "1.0.0"

    if app:
        title = app.config.get("SWAGGER_TITLE", title)
        version = app.config.get("SWAGGER_VERSION", version)

    return {
        "swagger": "2.0",
        "info": {
            "title": title,
            "version": version,
            "description": "Voter roll lookup, demographic analytics and seat reservation data.",
        },
        "tags": [
            {"name": "Auth", "description": "Access-code login and token verification"},
            {"name": "Voters", "description": "Voter search and village listings"},
            {"name": "Analytics", "description": "Aggregate voter statistics"},
            {"name": "Reference", "description": "Reservation seats and ward composition"},
        ],
        "definitions": {
            "ErrorResponse": {
                "type": "object",
                "properties": {
                    "success": {"type": "boolean", "example": False},
                    "error": {"type": "string", "example": "Village parameter is required"},
                    "code": {"type": "string", "example": "VALIDATION_ERROR"},
                    "details": {"type": "object"},
                    "request_id": {"type": "string"}
                }
            },
            "Voter": {
                "type": "object",
                "properties": {
                    "epicId": {"type": "string", "example": "ABC1234567"},
                    "name": {"type": "string"},
                    "age": {"type": "integer"},
                    "gender": {"type": "string"},
                    "village": {"type": "string"},
                    "division": {"type": "string"},
                    "divisionNo": {"type": "integer"},
                    "ward": {"type": "string"},
                    "wardNo": {"type": "integer"},
                    "taluka": {"type": "string"},
                    "serialNumber": {"type": "string"}
                }
            }
        }
    }
