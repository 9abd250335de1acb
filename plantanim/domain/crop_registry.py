"""
Static crop-cycle templates.

One CropConfig per supported crop. Templates are ordered by cycle day; entries
sharing a day keep their declaration order when tasks are generated.
"""
from typing import List, Optional

from plantanim.domain.models import (
    CropConfig,
    GrowthStage,
    TaskTemplate,
    TaskType,
)

# ── Calendar colours ─────────────────────────────────────────────────────────

PURPLE = "#8b5cf6"
GREEN = "#16a34a"
AMBER = "#f59e0b"
EMERALD = "#10b981"
BLUE = "#3b82f6"
CYAN = "#06b6d4"
RED = "#e74c3c"
RED_ORANGE = "#ef4444"
GREY = "#6b7280"

TASK_TYPE_COLORS: dict[TaskType, str] = {
    TaskType.PLANTING: GREEN,
    TaskType.FERTILIZING: AMBER,
    TaskType.WEEDING: EMERALD,
    TaskType.MONITORING: BLUE,
    TaskType.HARVEST_PREP: RED,
    TaskType.IRRIGATION: CYAN,
    TaskType.PEST_CONTROL: RED_ORANGE,
    TaskType.LAND_PREPARATION: PURPLE,
}


def _t(
    day: int,
    task_type: TaskType,
    title: str,
    description: str,
    stage: GrowthStage,
    weather_sensitive: bool,
) -> TaskTemplate:
    return TaskTemplate(
        day=day,
        task_type=task_type,
        title=title,
        description=description,
        growth_stage=stage,
        is_weather_sensitive=weather_sensitive,
        calendar_color=TASK_TYPE_COLORS[task_type],
    )


# ── Field crops ──────────────────────────────────────────────────────────────

RICE = CropConfig(
    id="rice",
    name="Rice",
    duration_days=110,
    task_templates=(
        _t(1, TaskType.LAND_PREPARATION, "Prepare Land for Planting",
           "Clear the field, level the ground, and prepare irrigation channels for rice planting.",
           GrowthStage.SEEDLING, False),
        _t(1, TaskType.PLANTING, "Plant Rice Seedlings",
           "Transplant rice seedlings into the prepared field. Space them properly for good growth.",
           GrowthStage.SEEDLING, True),
        _t(14, TaskType.FERTILIZING, "Apply First Fertilizer",
           "Apply nitrogen fertilizer to support early growth and tillering.",
           GrowthStage.VEGETATIVE, True),
        _t(30, TaskType.WEEDING, "Remove Weeds",
           "Clear weeds around rice plants to prevent competition for nutrients and water.",
           GrowthStage.VEGETATIVE, False),
        _t(45, TaskType.FERTILIZING, "Apply Second Fertilizer",
           "Apply fertilizer during panicle initiation stage for better grain development.",
           GrowthStage.FLOWERING, True),
        _t(50, TaskType.MONITORING, "Check for Pests",
           "Inspect rice plants for common pests like brown planthopper and stem borer.",
           GrowthStage.FLOWERING, False),
        _t(60, TaskType.IRRIGATION, "Manage Water Level",
           "Maintain proper water level in the field. Rice needs consistent water during flowering.",
           GrowthStage.FLOWERING, False),
        _t(90, TaskType.HARVEST_PREP, "Prepare for Harvest",
           "Check grain maturity. Stop irrigation and prepare harvesting tools.",
           GrowthStage.MATURATION, False),
        _t(100, TaskType.HARVEST_PREP, "Harvest Rice",
           "Harvest mature rice grains. Dry them properly before storage.",
           GrowthStage.HARVEST, True),
    ),
)

CORN = CropConfig(
    id="corn",
    name="Corn",
    duration_days=85,
    task_templates=(
        _t(1, TaskType.LAND_PREPARATION, "Prepare Soil for Corn",
           "Plow and harrow the field. Ensure good drainage for corn planting.",
           GrowthStage.SEEDLING, False),
        _t(1, TaskType.PLANTING, "Plant Corn Seeds",
           "Plant corn seeds at proper spacing. Cover with soil and water gently.",
           GrowthStage.SEEDLING, True),
        _t(10, TaskType.FERTILIZING, "Apply Starter Fertilizer",
           "Apply fertilizer to support early root development and growth.",
           GrowthStage.VEGETATIVE, True),
        _t(20, TaskType.WEEDING, "First Weeding",
           "Remove weeds around corn plants to reduce competition.",
           GrowthStage.VEGETATIVE, False),
        _t(35, TaskType.FERTILIZING, "Side-Dress Fertilizer",
           "Apply fertilizer when corn reaches knee-high stage for better yield.",
           GrowthStage.VEGETATIVE, True),
        _t(45, TaskType.MONITORING, "Check Corn Ears",
           "Monitor corn development. Check for pests and diseases.",
           GrowthStage.FRUITING, False),
        _t(70, TaskType.HARVEST_PREP, "Check Maturity",
           "Check if corn ears are mature. Kernels should be firm and milky.",
           GrowthStage.MATURATION, False),
        _t(80, TaskType.HARVEST_PREP, "Harvest Corn",
           "Harvest mature corn ears. Dry properly before storage or sale.",
           GrowthStage.HARVEST, True),
    ),
)

VEGETABLES = CropConfig(
    id="vegetables",
    name="Vegetables",
    duration_days=75,
    task_templates=(
        _t(1, TaskType.LAND_PREPARATION, "Prepare Garden Bed",
           "Prepare soil by tilling and adding compost. Ensure good drainage.",
           GrowthStage.SEEDLING, False),
        _t(1, TaskType.PLANTING, "Plant Vegetable Seedlings",
           "Transplant seedlings or plant seeds at proper spacing.",
           GrowthStage.SEEDLING, True),
        _t(12, TaskType.FERTILIZING, "Apply First Fertilizer",
           "Apply fertilizer to support early growth and root development.",
           GrowthStage.VEGETATIVE, True),
        _t(18, TaskType.WEEDING, "Remove Weeds",
           "Clear weeds around vegetable plants to prevent competition.",
           GrowthStage.VEGETATIVE, False),
        _t(30, TaskType.MONITORING, "Check for Pests",
           "Inspect plants for pests and diseases. Look for damaged leaves or fruits.",
           GrowthStage.FRUITING, False),
        _t(35, TaskType.FERTILIZING, "Apply Flowering Fertilizer",
           "Apply fertilizer to support flowering and fruit development.",
           GrowthStage.FLOWERING, True),
        _t(50, TaskType.PEST_CONTROL, "Monitor and Control Pests",
           "Check for pests regularly. Use appropriate control methods if needed.",
           GrowthStage.FRUITING, False),
        _t(60, TaskType.HARVEST_PREP, "Start Harvesting",
           "Begin harvesting mature vegetables. Harvest regularly to encourage more production.",
           GrowthStage.HARVEST, False),
    ),
)

ROOT_CROPS = CropConfig(
    id="root-crops",
    name="Root Crops",
    duration_days=100,
    task_templates=(
        _t(1, TaskType.LAND_PREPARATION, "Prepare Soil for Root Crops",
           "Loosen soil deeply and remove stones. Root crops need loose, well-drained soil.",
           GrowthStage.SEEDLING, False),
        _t(1, TaskType.PLANTING, "Plant Root Crop Seeds or Cuttings",
           "Plant seeds or cuttings at proper depth and spacing.",
           GrowthStage.SEEDLING, True),
        _t(15, TaskType.FERTILIZING, "Apply First Fertilizer",
           "Apply fertilizer to support early growth and root development.",
           GrowthStage.VEGETATIVE, True),
        _t(25, TaskType.WEEDING, "First Weeding",
           "Remove weeds carefully to avoid damaging developing roots.",
           GrowthStage.VEGETATIVE, False),
        _t(40, TaskType.WEEDING, "Second Weeding",
           "Continue weeding to keep the field clean.",
           GrowthStage.VEGETATIVE, False),
        _t(50, TaskType.MONITORING, "Check Root Development",
           "Monitor plant health and check for pests or diseases.",
           GrowthStage.FRUITING, False),
        _t(80, TaskType.HARVEST_PREP, "Prepare for Harvest",
           "Check root maturity. Stop watering a week before harvest.",
           GrowthStage.MATURATION, False),
        _t(95, TaskType.HARVEST_PREP, "Harvest Root Crops",
           "Harvest mature root crops. Handle carefully to avoid damage.",
           GrowthStage.HARVEST, True),
    ),
)

# ── Tree and perennial crops (annual maintenance cycle) ─────────────────────

MANGO = CropConfig(
    id="mango",
    name="Mango",
    duration_days=365,
    task_templates=(
        _t(1, TaskType.MONITORING, "Annual Tree Inspection",
           "Inspect mango trees for health, pests, and structural issues.",
           GrowthStage.VEGETATIVE, False),
        _t(30, TaskType.FERTILIZING, "Apply Fertilizer",
           "Apply balanced fertilizer to support tree growth and fruit production.",
           GrowthStage.VEGETATIVE, True),
        _t(60, TaskType.PEST_CONTROL, "Pest and Disease Control",
           "Monitor and control common mango pests like fruit flies and anthracnose.",
           GrowthStage.FLOWERING, False),
        _t(90, TaskType.MONITORING, "Monitor Flowering",
           "Check flowering progress. Ensure good pollination.",
           GrowthStage.FLOWERING, False),
        _t(120, TaskType.FERTILIZING, "Fruit Development Fertilizer",
           "Apply fertilizer to support fruit development and quality.",
           GrowthStage.FRUITING, True),
        _t(180, TaskType.HARVEST_PREP, "Prepare for Harvest",
           "Monitor fruit maturity. Prepare harvesting tools and storage.",
           GrowthStage.MATURATION, False),
        _t(210, TaskType.HARVEST_PREP, "Harvest Mangoes",
           "Harvest mature mangoes. Handle carefully to avoid bruising.",
           GrowthStage.HARVEST, True),
    ),
)

BANANA = CropConfig(
    id="banana",
    name="Banana",
    duration_days=300,
    task_templates=(
        _t(1, TaskType.PLANTING, "Plant Banana Suckers",
           "Plant banana suckers at proper spacing. Ensure good drainage.",
           GrowthStage.SEEDLING, True),
        _t(30, TaskType.FERTILIZING, "Apply First Fertilizer",
           "Apply fertilizer to support early growth and root development.",
           GrowthStage.VEGETATIVE, True),
        _t(60, TaskType.WEEDING, "Remove Weeds",
           "Clear weeds around banana plants to reduce competition.",
           GrowthStage.VEGETATIVE, False),
        _t(90, TaskType.MONITORING, "Monitor Plant Health",
           "Check for pests, diseases, and nutrient deficiencies.",
           GrowthStage.VEGETATIVE, False),
        _t(120, TaskType.FERTILIZING, "Apply Flowering Fertilizer",
           "Apply fertilizer before flowering to support bunch development.",
           GrowthStage.FLOWERING, True),
        _t(180, TaskType.MONITORING, "Monitor Bunch Development",
           "Check banana bunch development. Protect from pests and wind.",
           GrowthStage.FRUITING, False),
        _t(240, TaskType.HARVEST_PREP, "Prepare for Harvest",
           "Monitor bunch maturity. Prepare harvesting tools.",
           GrowthStage.MATURATION, False),
        _t(270, TaskType.HARVEST_PREP, "Harvest Banana",
           "Harvest mature banana bunches. Handle carefully.",
           GrowthStage.HARVEST, True),
    ),
)

COCONUT = CropConfig(
    id="coconut",
    name="Coconut",
    duration_days=365,
    task_templates=(
        _t(1, TaskType.MONITORING, "Annual Tree Inspection",
           "Inspect coconut trees for health, pests, and structural issues.",
           GrowthStage.VEGETATIVE, False),
        _t(30, TaskType.FERTILIZING, "Apply Fertilizer",
           "Apply fertilizer to support tree growth and nut production.",
           GrowthStage.VEGETATIVE, True),
        _t(90, TaskType.WEEDING, "Clear Underbrush",
           "Remove weeds and underbrush around coconut trees.",
           GrowthStage.VEGETATIVE, False),
        _t(120, TaskType.MONITORING, "Monitor Nut Development",
           "Check coconut development and tree health.",
           GrowthStage.FRUITING, False),
        _t(180, TaskType.FERTILIZING, "Mid-Year Fertilizer",
           "Apply fertilizer to maintain tree health and production.",
           GrowthStage.FRUITING, True),
        _t(240, TaskType.HARVEST_PREP, "Prepare for Harvest",
           "Monitor nut maturity. Prepare harvesting tools.",
           GrowthStage.MATURATION, False),
        _t(300, TaskType.HARVEST_PREP, "Harvest Coconuts",
           "Harvest mature coconuts. Continue regular harvesting.",
           GrowthStage.HARVEST, True),
    ),
)


CROP_REGISTRY: dict[str, CropConfig] = {
    crop.id: crop
    for crop in (RICE, CORN, VEGETABLES, ROOT_CROPS, MANGO, BANANA, COCONUT)
}


def get_crop_config(crop_id: str) -> Optional[CropConfig]:
    """Look up a crop template; ``None`` for unknown ids."""
    return CROP_REGISTRY.get(crop_id)


def list_crop_configs() -> List[CropConfig]:
    """All crop templates in registry order."""
    return list(CROP_REGISTRY.values())


def task_color(task_type: TaskType) -> str:
    """Calendar colour for a task type."""
    return TASK_TYPE_COLORS.get(task_type, GREY)
