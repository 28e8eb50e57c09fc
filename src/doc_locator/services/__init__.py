"""Services layer - stateless addressing logic and configuration."""

from doc_locator.services import location_codec
from doc_locator.services.content_fingerprint import compute_fingerprint
from doc_locator.services.location_codec import parse, serialize
from doc_locator.services.location_generator import (
	ADDRESSABLE_BLOCK_TAGS,
	GenerationOptions,
	LocationGenerator,
	iter_block_nodes,
)
from doc_locator.services.location_resolver import LocationResolver, ResolvedPoint
from doc_locator.services.location_validator import LocationValidator, ValidationResult
from doc_locator.services.logging_setup import configure_logging
from doc_locator.services.settings_manager import SettingsManager

__all__ = [
	"ADDRESSABLE_BLOCK_TAGS",
	"GenerationOptions",
	"LocationGenerator",
	"LocationResolver",
	"LocationValidator",
	"ResolvedPoint",
	"SettingsManager",
	"ValidationResult",
	"compute_fingerprint",
	"configure_logging",
	"iter_block_nodes",
	"location_codec",
	"parse",
	"serialize",
]
