from __future__ import annotations


class FarmError(Exception):
    """Base class for every caller-visible failure raised by the engine."""

    default_message = "farm operation failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def code(self) -> str:
        return type(self).__name__


# Validation errors: checked before any state is read or mutated.


class FarmValidationError(FarmError, ValueError):
    default_message = "invalid input"


class InvalidTileIndex(FarmValidationError):
    default_message = "Invalid tile index"


class InvalidPlotIndex(FarmValidationError):
    default_message = "Plot index must be between 0 and 24"


class InvalidCropType(FarmValidationError):
    default_message = "Invalid crop type"


class InvalidSeasonIndex(FarmValidationError):
    default_message = "Season index must be between 0 and 3"


class InvalidResourceType(FarmValidationError):
    default_message = "Invalid resource type"


class InvalidCraftableItem(FarmValidationError):
    default_message = "Invalid craftable item ID"


class InvalidPatternType(FarmValidationError):
    default_message = "Invalid pattern type"


class InvalidToolType(FarmValidationError):
    default_message = "Invalid tool type"


class InvalidQuantity(FarmValidationError):
    default_message = "Quantity must be at least 1"


class GatherAmountExceeded(FarmValidationError):
    default_message = "Cannot gather more than max per action"


class UnknownCommand(FarmValidationError):
    default_message = "Unknown command"


class InvalidOwnerKey(FarmValidationError):
    default_message = "Owner key may only contain letters, digits, '-' and '_'"


# Precondition errors: the input is well formed but the ledger disallows it.


class PreconditionError(FarmError):
    default_message = "precondition failed"


class TileNotEmpty(PreconditionError):
    default_message = "Tile is not empty"


class NoActiveCrop(PreconditionError):
    default_message = "No active crop on this tile"


class CropNotMature(PreconditionError):
    default_message = "Crop is not yet mature"


class InvalidSeasonForCrop(PreconditionError):
    default_message = "Cannot plant this crop in the current season"


class CraftingInProgress(PreconditionError):
    default_message = "Already crafting an item"


class NoCraftingInProgress(PreconditionError):
    default_message = "No crafting job in progress"


class CraftingNotComplete(PreconditionError):
    default_message = "Crafting not complete yet"


class GatherCooldownActive(PreconditionError):
    default_message = "Cannot gather resource yet (cooldown active)"


class WateringTooFrequent(PreconditionError):
    default_message = "Cannot water same plot more than once per hour"


class InsufficientFertilizer(PreconditionError):
    default_message = "Not enough fertilizer in inventory"


class InsufficientResources(PreconditionError):
    default_message = "Insufficient resources for this recipe"


class InsufficientPoints(PreconditionError):
    default_message = "Not enough points to complete this action"


class InsufficientToolUses(PreconditionError):
    default_message = "Not enough watering can uses remaining"


class NoCompostBins(PreconditionError):
    default_message = "No compost bins to collect from"


# Capacity errors: only gathering refuses to truncate at a stack cap.


class CapacityError(FarmError):
    default_message = "capacity exceeded"


class ResourceStackOverflow(CapacityError):
    default_message = "Resource stack would exceed maximum"


# Configuration errors signal a data-integrity bug in static tables or config.


class ConfigurationError(FarmError, RuntimeError):
    default_message = "invalid configuration"


class InvalidCropConfig(ConfigurationError):
    default_message = "Invalid crop configuration"


class InvalidGameConfig(ConfigurationError):
    default_message = "Invalid game configuration"


# Host errors come from identity and storage, before any core logic runs.


class HostError(FarmError):
    default_message = "host environment failure"


class IdentityMismatch(HostError):
    default_message = "Caller does not own this record"


class PlayerNotFound(HostError):
    default_message = "No player record for this identity"


class PlayerAlreadyExists(HostError):
    default_message = "Player record already exists"


class SeasonNotInitialized(HostError):
    default_message = "Season clock has not been initialized"


class SeasonAlreadyInitialized(HostError):
    default_message = "Season clock already exists"


class StorageError(HostError):
    default_message = "Storage read or write failed"
