"""Error types raised by the planning engines and the storage layer."""


class PlannerError(Exception):
    """Base class for meal planner errors."""


class InvalidQuantity(PlannerError):
    """Quantity per meal is zero, negative or not a number."""


class InvalidMealCount(PlannerError):
    """Requested number of meals is zero, negative or not an integer."""


class InvalidSchedule(PlannerError):
    """Duration or meals per day is not a positive integer."""


class ItemNotFound(PlannerError):
    """Plan item id is not part of the current plan."""

    def __init__(self, item_id):
        super().__init__(f"Plan item {item_id} not found")
        self.item_id = item_id


class FoodNotFound(PlannerError):
    """Referenced food id is not among the available foods."""

    def __init__(self, food_id):
        super().__init__(f"Food item with ID {food_id} not found")
        self.food_id = food_id


class NoActivePlan(PlannerError):
    """A plan edit was attempted before a plan was created or loaded."""

    def __init__(self):
        super().__init__("No meal plan is currently loaded")


class PersistenceError(PlannerError):
    """Loading or saving through the storage layer failed."""
