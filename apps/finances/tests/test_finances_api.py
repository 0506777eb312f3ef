"""API tests for invoices and the payment ledger."""

from __future__ import annotations

from datetime import date

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APISimpleTestCase

from apps.bookings.apps import get_runtime


class InvoiceAPITests(APISimpleTestCase):
    def setUp(self) -> None:
        get_runtime().reset(load_seed=True, today=date(2026, 3, 1))

    def test_invoice_for_booking(self) -> None:
        response = self.client.get(reverse("invoice-detail", args=["book-001"]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["total"], "LKR 450,000")
        self.assertEqual(response.data["amount_paid"], "LKR 150,000")
        self.assertEqual(response.data["balance_due"], "LKR 300,000")
        self.assertEqual(response.data["bill_to"]["name"], "Kasun Perera")
        self.assertEqual(len(response.data["payment_history"]), 1)

    def test_invoice_number_survives_rerender(self) -> None:
        url = reverse("invoice-detail", args=["book-002"])

        first = self.client.get(url).data["invoice_number"]
        second = self.client.get(url).data["invoice_number"]

        self.assertEqual(first, second)

    def test_unknown_booking(self) -> None:
        response = self.client.get(reverse("invoice-detail", args=["book-404"]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_payment_ledger(self) -> None:
        response = self.client.get(reverse("payment-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 5)
        self.assertTrue(all(p["status"] == "success" for p in response.data))
