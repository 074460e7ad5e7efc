"""Resource categories tracked by the snapshot store.

Every snapshot holds one value per category, imports first and exports
second, in the order of ``CATEGORIES``. That order is also the field order of
the persisted blob, so it must never change for an existing save format.
"""

from enum import Enum


class Direction(str, Enum):
    IMPORT = "import"
    EXPORT = "export"


class ResourceType(str, Enum):
    GOODS = "goods"
    FORESTRY = "forestry"
    FARMING = "farming"
    ORE = "ore"
    OIL = "oil"
    MAIL = "mail"
    FISH = "fish"


class Category:
    """A (direction, resource) pair, i.e. one channel of a snapshot."""

    def __init__(self, direction, resource):
        self.direction = Direction(direction)
        self.resource = ResourceType(resource)

    @property
    def name(self):
        return f"{self.direction.value}_{self.resource.value}"

    @property
    def label(self):
        return self.resource.value.capitalize()

    def __eq__(self, other):
        if not isinstance(other, Category):
            return NotImplemented
        return (self.direction, self.resource) == (other.direction, other.resource)

    def __hash__(self):
        return hash((self.direction, self.resource))

    def __repr__(self):
        return f"Category({self.name})"


IMPORT_RESOURCES = (
    ResourceType.GOODS,
    ResourceType.FORESTRY,
    ResourceType.FARMING,
    ResourceType.ORE,
    ResourceType.OIL,
    ResourceType.MAIL,
)
# fish is export only
EXPORT_RESOURCES = IMPORT_RESOURCES + (ResourceType.FISH,)

CATEGORIES = tuple(Category(Direction.IMPORT, r) for r in IMPORT_RESOURCES) + tuple(
    Category(Direction.EXPORT, r) for r in EXPORT_RESOURCES
)
CATEGORY_NAMES = tuple(category.name for category in CATEGORIES)
N_CATEGORIES = len(CATEGORIES)


def category_index(name):
    """Return the channel index of a category given its name.

    Args:
        name (str): Category name such as ``"export_fish"``.

    Returns:
        int: Position of the category in ``CATEGORIES``.

    Raises:
        ValueError: If the category does not exist.
    """
    try:
        return CATEGORY_NAMES.index(name)
    except ValueError as err:
        raise ValueError(
            f"Category {name} does not exist ... Check the available categories : "
            f"{list(CATEGORY_NAMES)}"
        ) from err


def categories_for(direction):
    """Return the ``(index, category)`` pairs of one direction in channel order."""
    direction = Direction(direction)
    return [(i, c) for i, c in enumerate(CATEGORIES) if c.direction == direction]
