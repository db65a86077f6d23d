"""Error Handler - provides readable error messages and graceful degradation hints."""

from typing import Optional


def format_error_message(
    operation: str,
    error: Exception,
    context: Optional[dict] = None,
    suggestion: Optional[str] = None,
) -> str:
    """
    Format a readable error message for logs.

    Args:
        operation: What operation was being performed (e.g., "Generating product image")
        error: The exception that occurred
        context: Additional context (e.g., {"url": "https://shop.example/x"})
        suggestion: Optional suggestion for how to fix the issue

    Returns:
        Formatted error message
    """
    error_type = type(error).__name__
    error_msg = str(error)
    detail = getattr(error, "detail", None)

    context_str = ""
    if context:
        context_parts = [f"{k}={v}" for k, v in context.items()]
        context_str = f" ({', '.join(context_parts)})"

    message = f"❌ {operation} failed{context_str}\n"
    message += f"   Error: {error_type}: {error_msg}"
    if detail:
        message += f"\n   Detail: {detail}"

    if suggestion:
        message += f"\n   💡 Suggestion: {suggestion}"

    return message


def get_fallback_suggestion(service: str, error: Exception) -> Optional[str]:
    """
    Get a suggestion for how to handle a service failure.

    Args:
        service: Service name ("Image Generation", "Script Generation", "Page Metadata")
        error: The exception

    Returns:
        Suggestion string or None
    """
    error_msg = f"{error} {getattr(error, 'detail', '') or ''}".lower()
    status = getattr(error, "upstream_status", None)

    if service == "Image Generation":
        if status in (401, 403) or "api key" in error_msg or "not configured" in error_msg:
            return "Check GATEWAY_API_KEY in .env file. Continuing without an image."
        elif status == 429 or "rate limit" in error_msg:
            return "Gateway rate limit exceeded. Continuing without an image."
        elif "timed out" in error_msg or "network" in error_msg:
            return "Network error or timeout. Continuing without an image."
        elif "no usable payload" in error_msg or "no image" in error_msg:
            return "The image model returned no image. Try IMAGE_REQUEST_MODE=images or another IMAGE_MODEL."
        else:
            return "Image generation failed. Continuing without an image."

    elif service == "Script Generation":
        if status in (401, 403) or "api key" in error_msg:
            return "Check GATEWAY_API_KEY in .env file."
        elif status == 429 or "rate limit" in error_msg:
            return "Gateway rate limit exceeded. Wait a few minutes and try again."
        elif "timed out" in error_msg:
            return "Gateway timed out. Raise GATEWAY_TIMEOUT_SECONDS or try again."
        elif "network" in error_msg:
            return "Network error. Check your internet connection."
        else:
            return "Script generation failed. Check TEXT_MODEL and the gateway status."

    elif service == "Page Metadata":
        return "Continuing without page metadata."

    return None
