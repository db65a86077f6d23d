"""Gateway Client - bearer-authenticated calls to the OpenAI-compatible generation gateway."""

import time
from typing import Any, Optional

import requests

from app.core.config import Settings
from app.core.errors import ConfigurationError, UpstreamError
from app.utils.text_utils import preview

ERROR_BODY_LIMIT = 500


class GatewayClient:
    """Client for image and script generation via the generation gateway."""

    def __init__(self, settings: Settings, logger: Any, session: Optional[requests.Session] = None):
        """
        Initialize the gateway client.

        Args:
            settings: Application settings
            logger: Logger instance
            session: Optional requests session (a module-level requests call is used when omitted)

        Raises:
            ConfigurationError: If GATEWAY_API_KEY is not configured
        """
        self.settings = settings
        self.logger = logger
        self.session = session
        self.base_url = settings.gateway_base_url.rstrip("/")
        self.api_key = settings.gateway_api_key

        if not self.api_key:
            raise ConfigurationError(
                "GATEWAY_API_KEY not configured",
                detail="Set GATEWAY_API_KEY in the environment or .env file.",
            )

    def _headers(self) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        if self.settings.gateway_app_url:
            headers["HTTP-Referer"] = self.settings.gateway_app_url
        if self.settings.gateway_app_title:
            headers["X-Title"] = self.settings.gateway_app_title
        return headers

    def _post(self, path: str, payload: dict[str, Any]) -> Any:
        """
        POST payload to the gateway and return the parsed JSON body.

        Raises:
            UpstreamError: On network failure, timeout, non-2xx status or non-JSON body
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        timeout = (self.settings.gateway_connect_timeout_seconds, self.settings.gateway_timeout_seconds)
        start_time = time.time()
        self.logger.debug(f"POST {url} (model={payload.get('model')})")

        try:
            poster = self.session.post if self.session is not None else requests.post
            response = poster(url, json=payload, headers=self._headers(), timeout=timeout)
        except requests.exceptions.Timeout as e:
            raise UpstreamError(f"Gateway call timed out after {timeout[1]}s", detail=str(e)) from e
        except requests.exceptions.RequestException as e:
            raise UpstreamError("Network error calling gateway", detail=str(e)) from e

        elapsed_time = time.time() - start_time
        if not 200 <= response.status_code < 300:
            error_body = (response.text or "")[:ERROR_BODY_LIMIT]
            self.logger.error(f"Gateway error: status {response.status_code} after {elapsed_time:.2f}s")
            raise UpstreamError(
                f"Gateway returned status {response.status_code}",
                detail=error_body,
                upstream_status=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError(
                "Gateway returned a body that is not JSON",
                detail=(response.text or "")[:ERROR_BODY_LIMIT],
                upstream_status=response.status_code,
            ) from e

        # Some providers report failures inside a 200 body
        if isinstance(data, dict) and data.get("error") and not data.get("choices") and not data.get("data"):
            raise UpstreamError(
                "Gateway reported an error",
                detail=str(data["error"])[:ERROR_BODY_LIMIT],
                upstream_status=response.status_code,
            )

        self.logger.debug(f"Gateway responded in {elapsed_time:.2f}s")
        return data

    def generate_image(self, prompt: str) -> Any:
        """
        Request a product image and return the raw gateway JSON.

        The response shape is provider-dependent; pass it to ImagePayloadNormalizer.

        Args:
            prompt: Image prompt

        Returns:
            Parsed JSON body
        """
        self.logger.info(f"Requesting image from {self.settings.image_model} ({self.settings.image_request_mode} mode)")
        self.logger.debug(f"Image prompt: {preview(prompt)}")

        if self.settings.image_request_mode == "images":
            payload = {
                "model": self.settings.image_model,
                "prompt": prompt,
                "size": self.settings.image_size,
            }
            return self._post("images/generations", payload)

        payload = {
            "model": self.settings.image_model,
            "messages": [
                {
                    "role": "user",
                    "content": [{"type": "text", "text": prompt}],
                }
            ],
            "max_tokens": self.settings.image_max_tokens,
            "modalities": ["text", "image"],
        }
        return self._post("chat/completions", payload)

    def generate_text(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        """
        Run a chat completion and return the assistant text.

        Args:
            prompt: User prompt
            system_prompt: Optional system message

        Returns:
            Message content ("" when the gateway returned none)

        Raises:
            UpstreamError: If the call fails
        """
        self.logger.info(f"Requesting script from {self.settings.text_model}")
        self.logger.debug(f"Script prompt: {preview(prompt)}")

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        data = self._post(
            "chat/completions",
            {
                "model": self.settings.text_model,
                "messages": messages,
                "temperature": self.settings.script_temperature,
            },
        )
        return extract_message_text(data)


def extract_message_text(data: Any) -> str:
    """
    Pull assistant text out of a chat completion body.

    Handles string content and content-part lists ({"type": "text", "text": ...}).
    Missing fields yield "".
    """
    if not isinstance(data, dict):
        return ""
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return ""
    message = choices[0].get("message")
    if not isinstance(message, dict):
        return ""

    content = message.get("content")
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        texts = [
            part.get("text", "")
            for part in content
            if isinstance(part, dict) and part.get("type") in ("text", "output_text") and isinstance(part.get("text"), str)
        ]
        return "\n".join(text for text in texts if text)
    return ""
