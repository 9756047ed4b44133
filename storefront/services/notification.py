from concurrent.futures import ThreadPoolExecutor, as_completed

from flask import current_app

import const
from storefront.lib.best_effort import best_effort
from storefront.lib.logger import logger
from storefront.tasks.send_notification import send_order_email
from storefront.third_parties.email import send_email, smtp_settings


class NotificationServices:

    @staticmethod
    @best_effort("order confirmation email")
    def send_order_confirmation(order):
        send_order_email.delay(str(order.id), "confirmation")
        return True

    @staticmethod
    @best_effort("order status email")
    def send_order_status_update(order):
        send_order_email.delay(str(order.id), "status_update")
        return True

    @staticmethod
    @best_effort("admin notification")
    def notify_admins(subject, template_name, context=None, recipients=None):
        """Send to every admin concurrently; one failed recipient never stops the rest."""
        recipients = (
            recipients
            if recipients is not None
            else current_app.config.get("ADMIN_EMAILS", [])
        )
        if not recipients:
            return 0

        smtp = smtp_settings()
        sent = 0
        with ThreadPoolExecutor(
            max_workers=min(const.ADMIN_NOTIFICATION_WORKERS, len(recipients))
        ) as executor:
            futures = {
                executor.submit(
                    send_email, recipient, subject, template_name, context, smtp
                ): recipient
                for recipient in recipients
            }
            for future in as_completed(futures):
                recipient = futures[future]
                try:
                    future.result()
                    sent += 1
                except Exception as e:
                    logger.warning(f"Admin notification to {recipient} failed: {e}")
        return sent
