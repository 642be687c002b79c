"""Integration tests for the booking form and fulfillment API.

Run with: pytest tests/test_booking_forms.py -v
"""

import uuid
from datetime import timedelta

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from bookings import models

SIGNATURE = "data:image/png;base64,iVBORw0KGgoAAAANSUhEUg=="


def delegate(name: str, *course_ids: str) -> dict:
    return {
        "name": name,
        "national_insurance": "qq123456c",
        "date_of_birth": "1990-05-17",
        "address": "1 High Street, Leeds",
        "postcode": "ls1 1aa",
        "selected_courses": list(course_ids),
    }


@pytest.fixture
def lead() -> models.Lead:
    return models.Lead.objects.create(name="Jo Smith", email="jo@example.com", status="quoted")


@pytest.fixture
def issued_form(api_client: APIClient, lead) -> dict:
    response = api_client.post(
        f"/api/leads/{lead.id}/booking-forms",
        {
            "courses": [
                {"name": "CourseX", "dates": "3-5 June", "number_of_delegates": 2, "price": "450.00"},
                {"name": "CourseY", "number_of_delegates": 1},
            ]
        },
        format="json",
    )
    assert response.status_code == 201
    return response.data


def fulfillment(api_client: APIClient, lead) -> dict:
    response = api_client.get(f"/api/leads/{lead.id}/fulfillment")
    assert response.status_code == 200
    return response.data


@pytest.mark.django_db
class TestCreateBookingForm:
    """Tests for POST /api/leads/{id}/booking-forms"""

    def test_creates_pending_form_with_roster(self, issued_form, lead):
        assert issued_form["status"] == "pending"
        assert [c["name"] for c in issued_form["courses"]] == ["CourseX", "CourseY"]
        assert issued_form["courses"][0]["price"] == "450.00"
        assert issued_form["courses"][1]["price"] is None
        assert models.BookingForm.objects.filter(lead=lead).count() == 1

    def test_lead_not_found(self, api_client):
        response = api_client.post(
            f"/api/leads/{uuid.uuid4()}/booking-forms", {"courses": []}, format="json"
        )
        assert response.status_code == 404
        assert response.data["code"] == "LEAD_NOT_FOUND"

    def test_rejects_zero_seat_course(self, api_client, lead):
        response = api_client.post(
            f"/api/leads/{lead.id}/booking-forms",
            {"courses": [{"name": "CourseX", "number_of_delegates": 0}]},
            format="json",
        )
        assert response.status_code == 400


@pytest.mark.django_db
class TestBookingFormDetail:
    """Tests for GET /api/booking-forms/{token}"""

    def test_returns_roster_and_blank_delegates(self, api_client, issued_form):
        response = api_client.get(f"/api/booking-forms/{issued_form['token']}")
        assert response.status_code == 200
        assert response.data["minimum_delegates"] == 2
        assert len(response.data["delegates"]) == 2
        assert response.data["delegates"][0]["selected_courses"] == []

    def test_invalid_token_format(self, api_client):
        response = api_client.get("/api/booking-forms/not-a-token")
        assert response.status_code == 400
        assert response.data["code"] == "INVALID_BOOKING_FORM_TOKEN"

    def test_unknown_token(self, api_client):
        response = api_client.get(f"/api/booking-forms/{uuid.uuid4()}")
        assert response.status_code == 404

    def test_expired_form(self, api_client, lead):
        form = models.BookingForm.objects.create(
            lead=lead, expires_at=timezone.now() - timedelta(hours=1)
        )
        response = api_client.get(f"/api/booking-forms/{form.token}")
        assert response.status_code == 410


@pytest.mark.django_db
class TestCheckAndSubmit:
    """Tests for POST /api/booking-forms/{token}/check and /submit"""

    def test_check_reports_live_status(self, api_client, issued_form):
        x, y = (c["id"] for c in issued_form["courses"])
        response = api_client.post(
            f"/api/booking-forms/{issued_form['token']}/check",
            {"delegates": [delegate("Ann", x), {"name": "Bob", "selected_courses": [x, y]}]},
            format="json",
        )
        assert response.status_code == 200
        assert [(c["status"], c["assigned"], c["required"]) for c in response.data["courses"]] == [
            ("valid", 2, 2),
            ("valid", 1, 1),
        ]
        assert response.data["delegates"][0]["complete"] is True
        assert "postcode" in response.data["delegates"][1]["missing_fields"]

    def test_submit_rejects_unfilled_course(self, api_client, issued_form):
        x, _ = (c["id"] for c in issued_form["courses"])
        response = api_client.post(
            f"/api/booking-forms/{issued_form['token']}/submit",
            {
                "delegates": [delegate("Ann", x), delegate("Bob", x)],
                "signature_data": SIGNATURE,
                "agreed_to_terms": True,
            },
            format="json",
        )
        assert response.status_code == 422
        assert response.data["code"] == "COURSE_ASSIGNMENT_MISMATCH"
        assert response.data["subject"] == "CourseY"
        assert models.BookingFormDelegate.objects.count() == 0

    def test_submit_persists_and_freezes(self, api_client, issued_form, lead):
        x, y = (c["id"] for c in issued_form["courses"])
        url = f"/api/booking-forms/{issued_form['token']}/submit"
        payload = {
            "delegates": [delegate("Ann", x), delegate("Bob", x, y)],
            "signature_data": SIGNATURE,
            "agreed_to_terms": True,
        }
        response = api_client.post(url, payload, format="json")

        assert response.status_code == 201
        assert [d["name"] for d in response.data["delegates"]] == ["Ann", "Bob"]
        assert response.data["delegates"][0]["postcode"] == "LS1 1AA"

        form = models.BookingForm.objects.get(token=issued_form["token"])
        assert form.status == "signed"
        assert form.signed_at is not None
        assert models.DelegateCourse.objects.filter(delegate__booking_form=form).count() == 3
        lead.refresh_from_db()
        assert lead.status == "won"

        again = api_client.post(url, payload, format="json")
        assert again.status_code == 409

    def test_empty_roster_rejects_zero_delegates(self, api_client, lead):
        created = api_client.post(
            f"/api/leads/{lead.id}/booking-forms", {"courses": []}, format="json"
        )
        response = api_client.post(
            f"/api/booking-forms/{created.data['token']}/submit",
            {"delegates": [], "signature_data": SIGNATURE, "agreed_to_terms": True},
            format="json",
        )
        assert response.status_code == 422
        assert response.data["code"] == "DELEGATE_MINIMUM_REACHED"
        assert models.BookingForm.objects.get(token=created.data["token"]).status == "pending"
        lead.refresh_from_db()
        assert lead.status == "quoted"


@pytest.mark.django_db
class TestFulfillment:
    """Tests for GET /api/leads/{id}/fulfillment and the invoice and payment-link writes"""

    def test_walks_through_every_stage(self, api_client, lead):
        assert fulfillment(api_client, lead)["stage"] == "awaiting_form_creation"

        response = api_client.post(
            f"/api/leads/{lead.id}/booking-forms",
            {"courses": [{"name": "CourseX", "number_of_delegates": 1},
                         {"name": "CourseY", "number_of_delegates": 1}]},
            format="json",
        )
        token = response.data["token"]
        x, y = (c["id"] for c in response.data["courses"])
        assert fulfillment(api_client, lead)["stage"] == "awaiting_signature"

        api_client.post(
            f"/api/booking-forms/{token}/submit",
            {"delegates": [delegate("Ann", x, y)], "signature_data": SIGNATURE, "agreed_to_terms": True},
            format="json",
        )
        status = fulfillment(api_client, lead)
        assert status["stage"] == "awaiting_invoice"
        assert status["message_template"] == "invoice_confirmation"

        response = api_client.post(
            f"/api/leads/{lead.id}/invoice", {"deferred": True}, format="json"
        )
        assert response.status_code == 204
        status = fulfillment(api_client, lead)
        assert status["stage"] == "awaiting_booking_creation"
        assert status["remaining_bookings"] == 2
        assert status["message_template"] is None

        models.Booking.objects.create(lead=lead, invoice_no="INV-3001")
        assert fulfillment(api_client, lead)["remaining_bookings"] == 1
        booking = models.Booking.objects.create(lead=lead, invoice_no="INV-3001")
        assert fulfillment(api_client, lead)["stage"] == "awaiting_joining_instructions"

        booking.joining_instructions_sent = True
        booking.save()
        status = fulfillment(api_client, lead)
        assert status["stage"] == "completed"
        assert status["can_resend_joining_instructions"] is True

    def test_signed_form_wins_over_newer_pending(self, api_client, lead):
        models.BookingForm.objects.create(
            lead=lead, status="signed", expires_at=timezone.now()
        )
        models.BookingForm.objects.create(lead=lead, expires_at=timezone.now() + timedelta(days=7))
        assert fulfillment(api_client, lead)["stage"] == "awaiting_invoice"

    def test_cancelled_bookings_are_ignored(self, api_client, lead):
        models.BookingForm.objects.create(
            lead=lead, status="signed", invoice_number="INV-1", expires_at=timezone.now()
        )
        models.Booking.objects.create(lead=lead, status="cancelled", invoice_no="INV-1")
        status = fulfillment(api_client, lead)
        assert status["stage"] == "awaiting_booking_creation"
        assert status["bookings_created"] == 0

    def test_invoice_requires_number(self, api_client, lead):
        models.BookingForm.objects.create(lead=lead, status="signed", expires_at=timezone.now())
        response = api_client.post(f"/api/leads/{lead.id}/invoice", {}, format="json")
        assert response.status_code == 422
        assert response.data["code"] == "INVOICE_NUMBER_REQUIRED"

    def test_payment_link_unblocks_booking_creation(self, api_client, lead):
        models.BookingForm.objects.create(lead=lead, status="signed", expires_at=timezone.now())
        assert fulfillment(api_client, lead)["stage"] == "awaiting_invoice"

        response = api_client.post(
            f"/api/leads/{lead.id}/payment-link",
            {"payment_link": "https://pay.example.com/c/abc123"},
            format="json",
        )
        assert response.status_code == 204
        form = models.BookingForm.objects.get(lead=lead)
        assert (form.payment_link_sent, form.invoice_sent) == (True, True)
        assert form.payment_link == "https://pay.example.com/c/abc123"
        assert fulfillment(api_client, lead)["stage"] == "awaiting_booking_creation"

        models.Booking.objects.create(lead=lead)
        assert fulfillment(api_client, lead)["stage"] == "awaiting_joining_instructions"

    def test_payment_link_must_be_url(self, api_client, lead):
        models.BookingForm.objects.create(lead=lead, status="signed", expires_at=timezone.now())
        response = api_client.post(
            f"/api/leads/{lead.id}/payment-link", {"payment_link": "not a link"}, format="json"
        )
        assert response.status_code == 400

    def test_invoice_for_unknown_lead(self, api_client):
        response = api_client.post(
            f"/api/leads/{uuid.uuid4()}/invoice", {"invoice_number": "INV-9"}, format="json"
        )
        assert response.status_code == 404
        assert response.data["code"] == "LEAD_NOT_FOUND"

    def test_invoice_without_form(self, api_client, lead):
        response = api_client.post(
            f"/api/leads/{lead.id}/invoice", {"invoice_number": "INV-9"}, format="json"
        )
        assert response.status_code == 404
        assert response.data["code"] == "BOOKING_FORM_NOT_FOUND"

    def test_invalid_lead_id(self, api_client):
        response = api_client.get("/api/leads/xyz/fulfillment")
        assert response.status_code == 400
        assert response.data["code"] == "INVALID_LEAD_ID"

    def test_lead_not_found(self, api_client):
        response = api_client.get(f"/api/leads/{uuid.uuid4()}/fulfillment")
        assert response.status_code == 404
