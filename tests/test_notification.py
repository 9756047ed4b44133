"""Tests for best-effort notifications and the email transport."""

from unittest import mock

import pytest

from storefront.errors.exceptions import ConfigurationError
from storefront.lib.best_effort import best_effort
from storefront.services.cart import CartService
from storefront.services.notification import NotificationServices
from storefront.services.order import OrderService
from storefront.tasks.send_notification import (
    build_order_email_context,
    send_order_email,
)
from storefront.third_parties.email import render_template, send_email

SMTP = {
    "host": "smtp.example.com",
    "port": 587,
    "user": "shop@example.com",
    "password": "app-password",
    "from_name": "Storefront",
    "encryption": "tls",
}
CONTEXT = {"order_number": "ORD-7", "items": [], "total": 10, "currency": "USD"}


@pytest.fixture
def order(customer, mouse, shipping_address):
    CartService.add_item(customer.id, str(mouse.id), 2)
    return OrderService.create_order(
        customer,
        {"shippingAddress": shipping_address, "paymentMethod": "stripe"},
        currency="USD",
    )


class TestBestEffort:
    def test_failure_returns_none(self):
        @best_effort("flaky call")
        def flaky():
            raise RuntimeError("boom")

        assert flaky() is None

    def test_success_passes_value_through(self):
        @best_effort("steady call")
        def steady(value):
            return value * 2

        assert steady(21) == 42


class TestNotifyAdmins:
    def test_one_failed_recipient_does_not_stop_the_rest(self, app):
        def fake_send(recipient, *args, **kwargs):
            if recipient == "ops@example.com":
                raise ConnectionError("mailbox unavailable")
            return True

        with mock.patch(
            "storefront.services.notification.send_email", side_effect=fake_send
        ) as send:
            sent = NotificationServices.notify_admins(
                "Return requested",
                "admin_return_request.html",
                {"order_number": "ORD-1"},
                recipients=["a@example.com", "ops@example.com", "b@example.com"],
            )

        assert sent == 2
        assert send.call_count == 3

    def test_no_recipients(self, app):
        with mock.patch("storefront.services.notification.send_email") as send:
            assert NotificationServices.notify_admins("x", "y.html") == 0
        send.assert_not_called()

    def test_confirmation_dispatch_failure_is_swallowed(self, order):
        with mock.patch(
            "storefront.services.notification.send_order_email"
        ) as task:
            task.delay.side_effect = ConnectionError("broker down")
            assert NotificationServices.send_order_confirmation(order) is None


class TestSendEmail:
    def test_missing_credentials(self):
        with pytest.raises(ConfigurationError):
            send_email(
                "buyer@example.com",
                "Hi",
                "order_confirmation.html",
                {},
                dict(SMTP, password=""),
            )

    def test_sends_over_starttls(self):
        with mock.patch("storefront.third_parties.email.smtplib.SMTP") as smtp_class:
            assert send_email(
                "buyer@example.com",
                "Order Confirmation",
                "order_confirmation.html",
                CONTEXT,
                SMTP,
            )

        smtp_class.assert_called_once_with("smtp.example.com", 587)
        server = smtp_class.return_value
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("shop@example.com", "app-password")
        args = server.sendmail.call_args[0]
        assert args[0] == "shop@example.com"
        assert args[1] == "buyer@example.com"
        server.quit.assert_called_once()

    def test_quits_when_login_fails(self):
        with mock.patch("storefront.third_parties.email.smtplib.SMTP") as smtp_class:
            server = smtp_class.return_value
            server.login.side_effect = RuntimeError("bad credentials")
            with pytest.raises(RuntimeError):
                send_email(
                    "buyer@example.com", "Hi", "order_confirmation.html", CONTEXT, SMTP
                )
        server.quit.assert_called_once()


class TestOrderEmails:
    def test_context_uses_order_currency(self, order, customer):
        context = build_order_email_context(order, customer)
        assert context["order_number"] == order.order_number
        assert context["currency"] == "USD"
        assert context["total"] == pytest.approx(order.total * order.exchange_rate)
        assert context["items"][0]["name"] == "Wireless Mouse"

    def test_template_renders_order_number(self, order, customer):
        html = render_template(
            "order_confirmation.html", build_order_email_context(order, customer)
        )
        assert order.order_number in html
        assert "Wireless Mouse" in html

    def test_task_sends_to_customer(self, order):
        with mock.patch("storefront.tasks.send_notification.send_email") as send:
            assert send_order_email.run(str(order.id), "confirmation") is True

        to_email, subject, template_name, _ = send.call_args[0]
        assert to_email == "buyer@example.com"
        assert subject == f"Order Confirmation - #{order.order_number}"
        assert template_name == "order_confirmation.html"

    def test_task_skips_unknown_order(self, app):
        with mock.patch("storefront.tasks.send_notification.send_email") as send:
            assert send_order_email.run("5f50c31e8a7d4b1f9c8e4b1a", "confirmation") is False
        send.assert_not_called()
