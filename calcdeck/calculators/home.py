"""
Home improvement material estimators.

These take a ``unit`` choice instead of per-field units because every
dimension of one job is measured with the same tape.
"""

import math
from typing import Any, Dict

from ..helpers import _choice, _err, _flag, _make_calc_entry, _num, _ok, _round_int, _tier

_UNITS = ["feet", "meters"]


def _project_size(amount: float, large: float, medium: float) -> str:
    if amount > large:
        return "Large Project"
    if amount >= medium:
        return "Medium Project"
    return "Small Project"


# 1. Paint Coverage ───────────────────────────────────────────────────────────
def run_paint_coverage(v: Dict[str, Any]) -> Dict[str, Any]:
    length, width, height = v["length"], v["width"], v["height"]
    walls = 2 * (length * height + width * height)
    ceiling = length * width if v["include_ceiling"] else 0.0
    area = (walls + ceiling) * v["coats"]
    coverage = v["coverage_per_unit"]
    units = math.ceil(area / coverage)
    size = _project_size(units, 10, 5)
    if coverage > 400:
        efficiency = "High"
    elif coverage >= 300:
        efficiency = "Standard"
    else:
        efficiency = "Lower"
    area_unit = "sq ft" if v["unit"] == "feet" else "sq m"
    return _ok(
        units,
        ["walls = 2(LH + WH)", "area = (walls + ceiling) * coats", "units = ceil(area / coverage)"],
        tier=size,
        paintable_area=walls + ceiling,
        total_coverage_area=area,
        area_unit=area_unit,
        coverage_efficiency=efficiency,
    )


# 2. Tile Flooring ────────────────────────────────────────────────────────────
def run_tile_flooring(v: Dict[str, Any]) -> Dict[str, Any]:
    area = v["area_length"] * v["area_width"]
    # tile dimensions are in inches for feet jobs and cm for meter jobs
    factor = 144 if v["unit"] == "feet" else 10000
    tile_area = v["tile_length"] * v["tile_width"] / factor
    base = area / tile_area
    tiles = math.ceil(base * (1 + v["wastage"] / 100))
    return _ok(tiles, ["tiles = ceil(area / tile area * (1 + wastage))"],
               floor_area=area, tile_area=tile_area, tiles_without_wastage=math.ceil(base))


# 3. Staircase ────────────────────────────────────────────────────────────────
_STAIR_RULES = {
    # ideal riser, 2R + T target, safe riser range, safe tread range
    "inches": (7.5, 24.5, (7.0, 8.0), (9.0, 11.0)),
    "cm": (19.0, 62.0, (17.8, 20.3), (22.9, 27.9)),
}


def run_staircase(v: Dict[str, Any]) -> Dict[str, Any]:
    ideal, pace, riser_range, tread_range = _STAIR_RULES[v["unit"]]
    target = v["ideal_riser"] or ideal
    risers = _round_int(v["total_rise"] / target)
    if risers < 1:
        return _err("Total rise is too small for a single step", "total_rise")
    riser = v["total_rise"] / risers
    tread = pace - 2 * riser
    if tread <= 0:
        return _err("Riser height is too tall for a usable tread", "ideal_riser")
    safe = riser_range[0] <= riser <= riser_range[1] and tread_range[0] <= tread <= tread_range[1]
    if risers > 15:
        complexity = "High Complexity"
    elif risers >= 8:
        complexity = "Medium Complexity"
    else:
        complexity = "Low Complexity"
    return _ok(
        risers,
        ["risers = round(total rise / ideal riser)", "tread = 2R+T target - 2 * riser", "run = tread * (risers - 1)"],
        tier="Safe Design" if safe else "Review Required",
        riser_height=riser,
        tread_depth=tread,
        total_run=tread * (risers - 1),
        complexity=complexity,
    )


# 4. Wallpaper Rolls ──────────────────────────────────────────────────────────
WALLPAPER_WASTE = 1.1


def run_wallpaper_rolls(v: Dict[str, Any]) -> Dict[str, Any]:
    drops = math.ceil(v["wall_width"] / v["roll_width"])
    drop_length = v["wall_height"] + v["pattern_repeat"]
    drops_per_roll = math.floor(v["roll_length"] / drop_length)
    if drops_per_roll == 0:
        rolls = math.ceil(drops * drop_length / v["roll_length"])
        log = ["rolls = ceil(drops * drop length / roll length)"]
    else:
        rolls = math.ceil(math.ceil(drops / drops_per_roll) * WALLPAPER_WASTE)
        log = ["drops = ceil(width / roll width)", "rolls = ceil(ceil(drops / drops per roll) * 1.1)"]
    return _ok(rolls, log, drops=drops, drop_length=drop_length, drops_per_roll=drops_per_roll)


# 5. HVAC Sizing ──────────────────────────────────────────────────────────────
_CLIMATE_BTU = {"hot": 30, "moderate": 25, "cool": 20}


def run_hvac_sizing(v: Dict[str, Any]) -> Dict[str, Any]:
    area = v["area"]
    sq_ft = area * 10.7639 if v["unit"] == "meters" else area
    btu = sq_ft * _CLIMATE_BTU[v["climate"]]
    tons = btu / 12000
    tier = _tier(tons, [(5, "Commercial Scale"), (3, "Large Home"), (1.5, "Medium Home")], "Small Space")
    return _ok(btu, ["BTU = sq ft * climate factor", "tons = BTU / 12000"], tier=tier,
               tons=tons, area_sq_ft=sq_ft)


# 6. Decking Boards ───────────────────────────────────────────────────────────
BOARD_GAP_IN = 0.125


def run_decking_boards(v: Dict[str, Any]) -> Dict[str, Any]:
    length, width = v["deck_length"], v["deck_width"]
    board, joist = v["board_width"], v["joist_spacing"]
    if v["unit"] == "meters":
        length *= 3.28084
        width *= 3.28084
        board /= 2.54
        joist /= 2.54
    rows = math.ceil(width * 12 / (board + BOARD_GAP_IN))
    boards = math.ceil(rows * 1.05)
    if joist <= 12:
        complexity = "High"
    elif joist <= 16:
        complexity = "Standard"
    else:
        complexity = "Low"
    size = _project_size(boards, 100, 50)
    return _ok(boards, ["rows = ceil(width in / (board + 1/8 in gap))", "boards = ceil(rows * 1.05)"],
               tier=size, rows=rows, deck_area_sq_ft=length * width, complexity=complexity)


# 7. Insulation Thickness ─────────────────────────────────────────────────────
_R_PER_INCH = {
    "fiberglass_batt": 3.2,
    "rockwool_batt": 3.8,
    "cellulose": 3.5,
    "spray_foam_open": 3.6,
    "spray_foam_closed": 6.5,
    "xps_board": 5.0,
}


def run_insulation_thickness(v: Dict[str, Any]) -> Dict[str, Any]:
    target = v["target_r_value"]
    thickness = target / _R_PER_INCH[v["material"]]
    comparison = {name: target / r for name, r in _R_PER_INCH.items()}
    return _ok(thickness, ["thickness in = target R / R per inch"],
               thickness_cm=thickness * 2.54, comparison=comparison)


# 8. Soil and Mulch ───────────────────────────────────────────────────────────
def run_soil_mulch(v: Dict[str, Any]) -> Dict[str, Any]:
    depth = v["depth"]
    if v["unit"] == "feet":
        volume = v["length"] * v["width"] * depth / 12
        bags = math.ceil(volume / 2)
        depth_in = depth
        log = ["volume cu ft = L * W * depth in / 12", "bags = ceil(volume / 2 cu ft)"]
    else:
        volume = v["length"] * v["width"] * depth / 100
        bags = math.ceil(volume / 0.05)
        depth_in = depth / 2.54
        log = ["volume cu m = L * W * depth cm / 100", "bags = ceil(volume / 0.05 cu m)"]
    if depth_in > 6:
        tier = "Deep"
    elif depth_in >= 3:
        tier = "Standard"
    else:
        tier = "Light"
    return _ok(volume, log, tier=tier, bags=bags, project_size=_project_size(volume, 50, 10).split()[0])


# ── Registry ────────────────────────────────────────────────────────────────

_CATEGORY = "home-improvement"


def _unit(default: str = "feet") -> Any:
    return _choice("unit", "Measurement unit", _UNITS, default)


def _dim(field_id: str, label: str) -> Any:
    return _num(field_id, label, gt=0, le=10000)


CALCULATORS: Dict[str, Dict[str, Any]] = {
    "paint_coverage": _make_calc_entry(
        "paint_coverage", run_paint_coverage, "Paint Coverage Calculator",
        "Gallons or litres of paint for a room.",
        _CATEGORY,
        [_dim("length", "Room length"), _dim("width", "Room width"), _dim("height", "Wall height"),
         _num("coats", "Coats", required=False, default=2.0, ge=1, le=10),
         _num("coverage_per_unit", "Coverage per gallon/litre", gt=0, le=1000),
         _flag("include_ceiling", "Paint the ceiling", True),
         _unit()],
        tags=["paint", "walls"],
        related=["wallpaper_rolls"],
    ),
    "tile_flooring": _make_calc_entry(
        "tile_flooring", run_tile_flooring, "Tile Flooring Calculator",
        "Tiles needed for a floor including wastage.",
        _CATEGORY,
        [_dim("area_length", "Floor length"), _dim("area_width", "Floor width"),
         _dim("tile_length", "Tile length (in or cm)"), _dim("tile_width", "Tile width (in or cm)"),
         _num("wastage", "Wastage", "%", required=False, default=10.0, ge=0, le=100),
         _unit()],
        tags=["flooring", "tiles"],
    ),
    "staircase": _make_calc_entry(
        "staircase", run_staircase, "Staircase Rise and Run",
        "Riser count, riser height, tread depth and total run.",
        _CATEGORY,
        [_num("total_rise", "Total rise", gt=0, le=2000),
         _num("ideal_riser", "Ideal riser height", required=False, gt=0, le=50),
         _choice("unit", "Unit", list(_STAIR_RULES), "inches")],
        tags=["stairs", "carpentry"],
    ),
    "wallpaper_rolls": _make_calc_entry(
        "wallpaper_rolls", run_wallpaper_rolls, "Wallpaper Roll Calculator",
        "Rolls of wallpaper for a wall including pattern repeat.",
        _CATEGORY,
        [_dim("wall_height", "Wall height"), _dim("wall_width", "Wall width"),
         _dim("roll_length", "Roll length"), _dim("roll_width", "Roll width"),
         _num("pattern_repeat", "Pattern repeat", required=False, default=0.0, ge=0),
         _unit("meters")],
        tags=["wallpaper", "walls"],
        related=["paint_coverage"],
    ),
    "hvac_sizing": _make_calc_entry(
        "hvac_sizing", run_hvac_sizing, "HVAC Sizing Calculator",
        "Cooling capacity in BTU and tons for a floor area.",
        _CATEGORY,
        [_dim("area", "Floor area"), _choice("climate", "Climate", list(_CLIMATE_BTU), "moderate"), _unit()],
        tags=["hvac", "air conditioning"],
        related=["insulation_thickness"],
    ),
    "decking_boards": _make_calc_entry(
        "decking_boards", run_decking_boards, "Decking Materials Calculator",
        "Deck boards needed with a 1/8 inch gap and 5% waste.",
        _CATEGORY,
        [_dim("deck_length", "Deck length (ft or m)"), _dim("deck_width", "Deck width (ft or m)"),
         _dim("board_width", "Board width (in or cm)"), _dim("joist_spacing", "Joist spacing (in or cm)"),
         _unit()],
        tags=["decking", "carpentry"],
    ),
    "insulation_thickness": _make_calc_entry(
        "insulation_thickness", run_insulation_thickness, "Insulation R-Value Calculator",
        "Thickness of insulation needed to reach a target R-value.",
        _CATEGORY,
        [_choice("material", "Material", list(_R_PER_INCH), "fiberglass_batt"),
         _num("target_r_value", "Target R-value", gt=0, le=100)],
        tags=["insulation", "energy"],
        related=["hvac_sizing"],
    ),
    "soil_mulch": _make_calc_entry(
        "soil_mulch", run_soil_mulch, "Garden Soil and Mulch Calculator",
        "Volume and bags of soil or mulch for a bed.",
        _CATEGORY,
        [_dim("length", "Bed length (ft or m)"), _dim("width", "Bed width (ft or m)"),
         _num("depth", "Depth (in or cm)", gt=0, le=100), _unit()],
        tags=["garden", "landscaping"],
    ),
}
