from __future__ import annotations
import logging
import httpx
from typing import Any, Dict, Optional
from .errors import GeneratorError
from .settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class GeminiClient:
	"""Single-shot text generation against the Gemini generateContent endpoint."""

	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		base_url: Optional[str] = None,
		model: Optional[str] = None,
		config: Optional[Settings] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		cfg = config or default_settings
		self.api_key = api_key or cfg.gemini_api_key
		self.model = model or cfg.gemini_model
		self.provider = cfg.gemini_provider
		if self.provider == "vertex":
			region = cfg.vertex_region
			project = cfg.vertex_project or "placeholder-project"
			# Vertex AI Generative REST endpoint (API key via header)
			self.base_url = base_url or (
				f"https://{region}-aiplatform.googleapis.com/v1/projects/{project}/locations/{region}/publishers/google/models/{self.model}:generateContent"
			)
			self._auth_in_query = False
		else:
			# Google AI Studio (Generative Language API)
			self.base_url = base_url or f"https://generativelanguage.googleapis.com/v1beta/models/{self.model}:generateContent"
			self._auth_in_query = True
		self._client = httpx.AsyncClient(timeout=cfg.gemini_timeout_seconds, transport=transport)

	@property
	def configured(self) -> bool:
		return bool(self.api_key)

	async def generate(self, system_persona: str, user_prompt: str, temperature: float) -> str:
		if not self.api_key:
			raise GeneratorError("GEMINI_API_KEY is not configured")
		payload: Dict[str, Any] = {
			"systemInstruction": {"parts": [{"text": system_persona}]},
			"contents": [{"role": "user", "parts": [{"text": user_prompt}]}],
			"generationConfig": {"temperature": temperature},
		}
		params: Dict[str, Any] = {}
		headers: Dict[str, str] = {}
		if self._auth_in_query:
			params["key"] = self.api_key
		else:
			headers["x-goog-api-key"] = self.api_key
		try:
			r = await self._client.post(self.base_url, params=params, headers=headers, json=payload)
			r.raise_for_status()
		except httpx.HTTPStatusError as http_err:
			logger.error("Gemini returned HTTP %s: %s", http_err.response.status_code, http_err.response.text)
			raise GeneratorError(f"Gemini call failed with HTTP {http_err.response.status_code}") from http_err
		except httpx.RequestError as net_err:
			raise GeneratorError(f"Gemini request failed: {net_err}") from net_err
		try:
			data = r.json()
			text = data["candidates"][0]["content"]["parts"][0]["text"]
		except (ValueError, KeyError, IndexError, TypeError) as e:
			raise GeneratorError(f"Unexpected Gemini response: {r.text}") from e
		if not isinstance(text, str):
			raise GeneratorError(f"Unexpected Gemini response: {r.text}")
		return text

	async def aclose(self) -> None:
		await self._client.aclose()
