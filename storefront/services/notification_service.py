# storefront/services/notification_service.py
from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Przekazuje zdarzenia zamowien do kolejki Celery.
    Samo dostarczenie (email, websocket) to osobny serwis.
    """

    @staticmethod
    def order_placed(user_id: str, order_id: str, order_number: str):
        try:
            send_order_notification_task.delay(user_id, order_id, order_number)
        except Exception as e:
            # zamowienie jest juz zacommitowane - brak brokera nie moze go cofnac
            logger.error(f"Nie udalo sie zakolejkowac powiadomienia dla zamowienia {order_id}: {e}")

    @staticmethod
    def order_cancelled(user_id: str, order_id: str, order_number: str):
        try:
            send_order_cancelled_task.delay(user_id, order_id, order_number)
        except Exception as e:
            logger.error(f"Nie udalo sie zakolejkowac anulowania zamowienia {order_id}: {e}")


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: str, order_id: str, order_number: str):
    logger.info(f"[NOTIFICATION] User {user_id}: order {order_number} ({order_id}) received")
    return {"user_id": user_id, "order_id": order_id, "type": "order_placed", "status": "sent"}


@celery_app.task(name="storefront.services.notification_service.send_order_cancelled_task")
def send_order_cancelled_task(user_id: str, order_id: str, order_number: str):
    logger.info(f"[NOTIFICATION] User {user_id}: order {order_number} ({order_id}) cancelled")
    return {"user_id": user_id, "order_id": order_id, "type": "order_cancelled", "status": "sent"}
