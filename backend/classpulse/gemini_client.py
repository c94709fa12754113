from __future__ import annotations
import logging
import httpx
from typing import Any, Dict, List, Optional
from .errors import GeneratorError
from .settings import settings


logger = logging.getLogger(__name__)


class GeminiClient:
	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		base_url: Optional[str] = None,
		model: Optional[str] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self.api_key = api_key or settings.gemini_api_key
		self.model = model or settings.gemini_model
		self.provider = settings.gemini_provider
		if self.provider == "vertex":
			region = settings.vertex_region
			project = settings.vertex_project or "placeholder-project"
			# Vertex AI Generative REST endpoint (API key via header)
			self.base_url = base_url or (
				f"https://{region}-aiplatform.googleapis.com/v1/projects/{project}/locations/{region}/publishers/google/models/{self.model}:generateContent"
			)
			self._auth_in_query = False
		else:
			# Google AI Studio (Generative Language API)
			self.base_url = base_url or f"https://generativelanguage.googleapis.com/v1beta/models/{self.model}:generateContent"
			self._auth_in_query = True
		self._client = httpx.AsyncClient(timeout=settings.gemini_timeout_seconds, transport=transport)

	async def generate(
		self,
		prompt: str,
		*,
		response_schema: Optional[Dict[str, Any]] = None,
	) -> str:
		return await self.generate_multimodal(
			[{"text": prompt}],
			response_schema=response_schema,
		)

	async def generate_multimodal(
		self,
		parts: List[Dict[str, Any]],
		*,
		role: str = "user",
		response_schema: Optional[Dict[str, Any]] = None,
	) -> str:
		payload: Dict[str, Any] = {"contents": [{"role": role, "parts": parts}]}
		generation_config: Dict[str, Any] = {}
		if response_schema is not None:
			generation_config["responseMimeType"] = "application/json"
			generation_config["responseSchema"] = response_schema
		if generation_config:
			payload["generationConfig"] = generation_config
		return await self._post_payload(payload)

	async def _post_payload(self, payload: Dict[str, Any]) -> str:
		# Checked per call so request validation still runs without a key
		if not self.api_key:
			raise GeneratorError("GEMINI_API_KEY is not configured")
		params: Dict[str, Any] = {}
		headers: Dict[str, str] = {}
		if self._auth_in_query:
			params["key"] = self.api_key
		else:
			headers["x-goog-api-key"] = self.api_key
		# Single attempt: a failed call fails the enclosing request
		try:
			r = await self._client.post(self.base_url, params=params, headers=headers, json=payload)
			r.raise_for_status()
		except httpx.HTTPStatusError as http_err:
			logger.warning("Gemini returned HTTP %s", http_err.response.status_code)
			raise GeneratorError(
				f"Gemini request failed with HTTP {http_err.response.status_code}",
				details=http_err.response.text[:500],
			) from http_err
		except httpx.RequestError as net_err:
			logger.warning("Gemini request error: %s", net_err)
			raise GeneratorError(f"Gemini request failed: {net_err}") from net_err
		try:
			data = r.json()
			return data["candidates"][0]["content"]["parts"][0]["text"]
		except (ValueError, KeyError, IndexError, TypeError) as err:
			raise GeneratorError("Unexpected Gemini response", details=r.text[:500]) from err

	async def aclose(self) -> None:
		await self._client.aclose()
