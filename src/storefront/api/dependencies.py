"""Request-scoped helpers shared by the routers."""

from fastapi import Header, HTTPException
from starlette.concurrency import run_in_threadpool

from storefront.access.policy import Actor
from storefront.domain import storefront
from storefront.utils.logging import add_context


def current_actor(
    x_user_id: str | None = Header(default=None),
    x_user_role: str = Header(default="USER"),
) -> Actor:
    """Identity forwarded by the upstream gateway, already verified."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    try:
        actor = Actor.of(x_user_id, x_user_role)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown role: {x_user_role}") from None
    add_context(user_id=actor.user_id, role=actor.role.value)
    return actor


async def run_in_domain(fn, *args, **kwargs):
    """Run a blocking service call on the threadpool inside the domain context."""

    def _call():
        with storefront.domain_context():
            return fn(*args, **kwargs)

    return await run_in_threadpool(_call)
