from flask_restx import fields


class Models:
    def __init__(self, api):
        self.api = api

        self.error_model = api.model('Error', {
            'error': fields.String(description='Error message'),
        })

        self.pet_model = api.model('Pet', {
            'id': fields.Integer(required=True, description='The pet ID (client supplied)'),
            'name': fields.String(required=True, description='The pet name'),
        })

        self.pet_created_model = api.model('PetCreated', {
            'message': fields.String(description='Confirmation message'),
            'pet': fields.Raw(description='The pet exactly as submitted'),
        })

        self.schedule_request_model = api.model('ScheduleRequest', {
            'petId': fields.Integer(required=True, description='Pet to book'),
            'serviceId': fields.Integer(required=True, description='Requested service'),
            'date': fields.String(required=True, description='Appointment date'),
            'time': fields.String(required=True, description='Appointment time'),
        })

        self.appointment_model = api.inherit('Appointment', self.schedule_request_model, {
            'clinicName': fields.String(description='Clinic name'),
            'clinicAddress': fields.String(description='Clinic address'),
            'clinicPhone': fields.String(description='Clinic phone'),
        })

        self.appointment_listing_model = api.inherit('AppointmentListing', self.appointment_model, {
            'petName': fields.String(description='Name of the booked pet, or a placeholder'),
        })

        self.purchase_request_model = api.model('PurchaseRequest', {
            'products': fields.Raw(required=True, description='Products being bought'),
            'cartItems': fields.Raw(required=True, description='Cart line items'),
            'paymentData': fields.Raw(required=True, description='Payment details (not stored)'),
        })

        self.purchase_model = api.model('Purchase', {
            'orderId': fields.Integer(description='Sequential order number'),
            'cartItems': fields.Raw(description='Cart line items'),
            'status': fields.String(description='Purchase status'),
        })
