#!/usr/bin/env python3
import time
import logging
import requests

from style_adder import config
from style_adder.errors import GenerationError

logger = logging.getLogger(__name__)


class BackendPreviewGenerator:
    """
    Generates preview images through the app backend's /api/generate route.
    One attempt per call; any failure raises GenerationError.
    """
    def __init__(self, base_url: str = config.BACKEND_URL,
                 style: str = config.PREVIEW_STYLE,
                 timeout: float | None = config.PREVIEW_TIMEOUT,
                 session: requests.Session | None = None):
        self.url = f"{base_url.rstrip('/')}/api/generate"
        self.style = style
        self.timeout = timeout
        self.session = session or requests.Session()

    def generate(self, prompt: str, reference_image_url: str) -> str:
        payload = {"prompt": prompt, "image": reference_image_url, "style": self.style}
        logger.info(f"Requesting preview image from {self.url}")
        try:
            response = self.session.post(self.url, json=payload, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.ConnectionError as e:
            raise GenerationError(f"Connection error reaching {self.url}: {e}") from e
        except requests.exceptions.HTTPError as e:
            body = e.response.text[:500] if e.response is not None else ''
            raise GenerationError(f"Backend returned HTTP {e.response.status_code if e.response is not None else '?'}: {body}") from e
        except requests.RequestException as e:
            raise GenerationError(f"Preview request failed: {e}") from e

        try:
            response_data = response.json()
        except ValueError as e:
            raise GenerationError(f"Backend response is not valid JSON: {response.text[:200]}") from e

        image_url = response_data.get('imageUrl') if isinstance(response_data, dict) else None
        if not image_url:
            logger.debug(f"Unexpected backend response: {response_data}")
            raise GenerationError("No image URL in response")
        logger.info("Preview image generated.")
        return image_url


class ReplicatePreviewGenerator:
    """
    Generates previews by creating a prediction on the Replicate API and
    polling it until it finishes.
    """
    def __init__(self, api_token: str | None = config.REPLICATE_API_TOKEN,
                 model_version: str | None = config.REPLICATE_MODEL_VERSION,
                 api_url: str = config.REPLICATE_API_URL,
                 poll_interval: float = config.REPLICATE_POLL_INTERVAL,
                 max_attempts: int = config.REPLICATE_MAX_ATTEMPTS,
                 timeout: float | None = config.PREVIEW_TIMEOUT,
                 session: requests.Session | None = None,
                 sleep=time.sleep):
        self.api_token = api_token
        self.model_version = model_version
        self.api_url = api_url.rstrip('/')
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts
        self.timeout = timeout
        self.session = session or requests.Session()
        self.sleep = sleep

    def _headers(self) -> dict:
        return {'Authorization': f"Token {self.api_token}", 'Content-Type': 'application/json'}

    def _request_json(self, method: str, url: str, **kwargs) -> dict:
        try:
            response = self.session.request(method, url, headers=self._headers(), timeout=self.timeout, **kwargs)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            raise GenerationError(f"Replicate request to {url} failed: {e}") from e
        except ValueError as e:
            raise GenerationError(f"Replicate response from {url} is not valid JSON") from e
        if not isinstance(data, dict):
            raise GenerationError(f"Unexpected Replicate response from {url}: {data!r}")
        return data

    def generate(self, prompt: str, reference_image_url: str) -> str:
        if not self.api_token:
            raise GenerationError("REPLICATE_API_TOKEN is not set. Cannot use the Replicate generator.")
        if not self.model_version:
            raise GenerationError("REPLICATE_MODEL_VERSION is not set. Cannot use the Replicate generator.")

        payload = {
            "version": self.model_version,
            "input": {
                "prompt": prompt,
                "image": reference_image_url,
                "num_outputs": 1,
                "guidance_scale": 7.5,
                "num_inference_steps": 50,
            },
        }
        logger.info("Creating Replicate prediction...")
        prediction = self._request_json('POST', self.api_url, json=payload)
        prediction_id = prediction.get('id')
        if not prediction_id:
            raise GenerationError("Failed to create prediction (no id in response)")
        logger.info(f"Created prediction {prediction_id}, polling for result")

        for attempt in range(1, self.max_attempts + 1):
            self.sleep(self.poll_interval)
            prediction = self._request_json('GET', f"{self.api_url}/{prediction_id}")
            status = prediction.get('status')
            if status == 'succeeded':
                output = prediction.get('output')
                image_url = output[0] if isinstance(output, list) and output else output
                if not image_url or not isinstance(image_url, str):
                    raise GenerationError(f"Prediction {prediction_id} succeeded without an output URL")
                return image_url
            if status in ('failed', 'canceled'):
                raise GenerationError(f"Image generation {status}: {prediction.get('error') or 'no details'}")
            logger.debug(f"Prediction {prediction_id} status '{status}' (attempt {attempt}/{self.max_attempts})")

        raise GenerationError(f"Timeout waiting for image generation after {self.max_attempts} attempts")


def generate_preview(prompt: str, reference_image_url: str, generator=None) -> str:
    """
    Generates one preview image and returns its URL.

    Raises:
        GenerationError: on any transport, HTTP or response-shape failure.
    """
    generator = generator or BackendPreviewGenerator()
    return generator.generate(prompt, reference_image_url)
