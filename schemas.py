pet = {
    "type": "object",
    "required": ["id", "name"],
    "properties": {
        "id": {
            "type": "integer"
        },
        "name": {
            "type": "string"
        },
    }
}


pet_created = {
    "type": "object",
    "required": ["message", "pet"],
    "properties": {
        "message": {
            "type": "string"
        },
        "pet": pet,
    }
}


appointment = {
    "type": "object",
    "required": ["petId", "serviceId", "date", "time", "clinicName", "clinicAddress", "clinicPhone"],
    "properties": {
        "petId": {
            "type": "integer"
        },
        "serviceId": {
            "type": "integer"
        },
        "date": {
            "type": "string"
        },
        "time": {
            "type": "string"
        },
        "clinicName": {
            "type": "string"
        },
        "clinicAddress": {
            "type": "string"
        },
        "clinicPhone": {
            "type": "string"
        },
    }
}


appointment_listing = {
    "type": "object",
    "required": appointment["required"] + ["petName"],
    "properties": {
        **appointment["properties"],
        "petName": {
            "type": "string"
        },
    }
}


schedule_entry = {
    "type": "object",
    "required": ["id"],
    "properties": {
        "id": {
            "type": "integer"
        },
    }
}


purchase = {
    "type": "object",
    "required": ["orderId", "cartItems", "status"],
    "additionalProperties": False,
    "properties": {
        "orderId": {
            "type": "integer",
            "minimum": 1
        },
        "cartItems": {
            "type": "array"
        },
        "status": {
            "type": "string"
        },
    }
}


error = {
    "type": "object",
    "required": ["error"],
    "properties": {
        "error": {
            "type": "string"
        },
    }
}
