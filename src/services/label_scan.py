"""Label scanning service using Claude Vision."""

import base64
import binascii
import json
import logging
import re
from dataclasses import dataclass, field

import anthropic

from src.config import get_settings
from src.exceptions import ValidationError

logger = logging.getLogger(__name__)

DATA_URL_PATTERN = re.compile(r"^data:(?P<media_type>image/[\w.+-]+);base64,", re.IGNORECASE)
CONFIDENCE_LEVELS = ("high", "medium", "low")

# Leading bytes of the image formats Claude accepts
IMAGE_SIGNATURES = (
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
)

LABEL_PROMPT = """Analyze this photo of a wine or beer label and extract what you can read.

Return ONLY a JSON object with these fields:
- "name": the wine or beer name (string or null)
- "producer": the winery, brewery or producer (string or null)
- "vintage": the vintage year as a number (or null)
- "country": country of origin (string or null)
- "region": region or appellation (string or null)
- "grapes": list of grape varieties or beer styles (empty list if unknown)
- "confidence": "high", "medium" or "low" for how sure you are overall

Do not guess fields you cannot read; use null instead.

Example output:
{"name": "Cuvee Prestige", "producer": "Chateau Example", "vintage": 2018, "country": "France", "region": "Bordeaux", "grapes": ["Merlot", "Cabernet Franc"], "confidence": "high"}

Return ONLY the JSON object, no other text."""


class LabelScanError(ValueError):
    """The label could not be scanned."""


@dataclass
class LabelDetails:
    """Fields read from a label."""

    name: str | None = None
    producer: str | None = None
    vintage: int | None = None
    country: str | None = None
    region: str | None = None
    grapes: list[str] = field(default_factory=list)
    confidence: str = "low"

    @property
    def auto_fill(self) -> bool:
        """Only confident reads may fill a form without confirmation."""
        return self.confidence == "high"


def split_image_payload(image_base64: str) -> tuple[str, str]:
    """Strip an optional data URL prefix and work out the media type.

    Returns:
        (media_type, base64 data)
    """
    data = "".join(image_base64.split())
    match = DATA_URL_PATTERN.match(data)
    if match:
        return match.group("media_type").lower(), data[match.end() :]

    prefix = data[:24]
    try:
        head = base64.b64decode(prefix + "=" * (-len(prefix) % 4), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError("Image is not valid base64") from e
    for signature, media_type in IMAGE_SIGNATURES:
        if head.startswith(signature):
            return media_type, data
    if head[:4] == b"RIFF" and head[8:12] == b"WEBP":
        return "image/webp", data
    return "image/jpeg", data


def strip_code_fence(text: str) -> str:
    """Remove a surrounding markdown code block, if any."""
    text = text.strip()
    if not text.startswith("```"):
        return text
    lines = text.split("\n")[1:]
    if lines and lines[-1].strip().startswith("```"):
        lines = lines[:-1]
    return "\n".join(lines).strip()


def parse_label_response(response_text: str) -> LabelDetails:
    """Turn the model's reply into LabelDetails."""
    try:
        data = json.loads(strip_code_fence(response_text))
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse Claude response as JSON: {e}")
        logger.error(f"Response was: {response_text}")
        raise LabelScanError(f"Failed to parse label: {e}") from e
    if not isinstance(data, dict):
        raise LabelScanError("Failed to parse label: expected a JSON object")

    vintage = data.get("vintage")
    try:
        vintage = int(vintage) if vintage not in (None, "") else None
    except (TypeError, ValueError):
        vintage = None

    grapes = data.get("grapes") or []
    if isinstance(grapes, str):
        grapes = [grapes]

    confidence = str(data.get("confidence") or "low").lower()
    if confidence not in CONFIDENCE_LEVELS:
        confidence = "low"

    return LabelDetails(
        name=data.get("name") or None,
        producer=data.get("producer") or None,
        vintage=vintage,
        country=data.get("country") or None,
        region=data.get("region") or None,
        grapes=[str(grape) for grape in grapes if grape],
        confidence=confidence,
    )


class LabelScanService:
    """Service for reading bottle labels using Claude Vision."""

    def __init__(self, client: anthropic.Anthropic | None = None) -> None:
        settings = get_settings()
        self.api_key = settings.anthropic_api_key
        self.model = settings.label_scan_model
        self._client = client

    @property
    def is_configured(self) -> bool:
        """Check if the Anthropic API is configured."""
        return self._client is not None or bool(self.api_key)

    def scan(self, image_base64: str) -> LabelDetails:
        """Read a label photo.

        Args:
            image_base64: Base64 image, optionally a ``data:image/...`` URL

        Raises:
            ValidationError: the image is not base64
            LabelScanError: not configured, or the reply could not be parsed
        """
        if not self.is_configured:
            raise LabelScanError("Anthropic API not configured")

        media_type, data = split_image_payload(image_base64)
        client = self._client or anthropic.Anthropic(api_key=self.api_key)

        message = client.messages.create(
            model=self.model,
            max_tokens=1024,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "image",
                            "source": {
                                "type": "base64",
                                "media_type": media_type,
                                "data": data,
                            },
                        },
                        {
                            "type": "text",
                            "text": LABEL_PROMPT,
                        },
                    ],
                }
            ],
        )

        details = parse_label_response(message.content[0].text)
        logger.info(f"Scanned label: {details.name!r} ({details.confidence} confidence)")
        return details
