import asyncio

from sqlalchemy.exc import OperationalError

from storefront.database import SessionLocal
from storefront.repositories import ProductRepository
from storefront.tasks.celery_app import celery_app


@celery_app.task(bind=True, max_retries=3, ignore_result=True)
def increment_view_count(self, product_id: int):
    """Add one view to a product outside the request that recorded it."""
    db = SessionLocal()
    try:
        db.execute(ProductRepository.increment_view_count_statement(product_id))
        db.commit()
    except OperationalError as exc:
        db.rollback()
        # Retry on transient connection errors
        raise self.retry(exc=exc, countdown=10)
    finally:
        db.close()


async def enqueue_view_increment(product_id: int) -> None:
    # Publishing is blocking I/O. With retry off an unreachable broker fails
    # the publish at once instead of holding up the detail response.
    await asyncio.to_thread(increment_view_count.apply_async, args=[product_id], retry=False)
