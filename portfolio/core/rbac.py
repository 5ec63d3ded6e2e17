from fastapi import Depends, HTTPException, status

from portfolio.core.security import RequestContext, get_request_context


def require_roles(*required: str):
    """
    Usage:
      Depends(require_roles("admin"))
      Depends(require_roles("teacher", "admin"))  # any-of
    """
    required_set = set(required)

    def _dep(ctx: RequestContext = Depends(get_request_context)) -> RequestContext:
        if ctx.user.role not in required_set:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Forbidden. Requires one of: {sorted(required_set)}",
            )
        return ctx

    return _dep
