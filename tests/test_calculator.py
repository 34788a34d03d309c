import pytest

from logic.calculator import StaffingCalculator, parse_census
from logic.errors import DuplicateEntry, InvalidFormat, InvalidNumber, MissingField
from logic.registry import DEFAULT_STAFF_TYPES, StaffTypeRegistry


def _calc(carry_forward=True):
    reg = StaffTypeRegistry(seed=DEFAULT_STAFF_TYPES)
    return reg, StaffingCalculator(reg, carry_forward_census=carry_forward)


def _ids(calc):
    return [r.staff_type_id for r in calc.rows()]


def test_one_row_per_staff_type_with_default_ratios():
    reg, calc = _calc()
    rows = calc.rows()
    assert len(rows) == len(reg.list())
    assert [(r.title, r.ratio) for r in rows] == [
        ("RN", "1:1"), ("LPN", "1:2"), ("CNA", "1:3"), ("UC", "1:50"), ("MA", "1:4"),
    ]
    assert all(r.census is None and r.required_staff is None for r in rows)


def test_set_census_computes_required_staff():
    _, calc = _calc()
    assert calc.set_census(1, "7").required_staff == 7      # RN 1:1
    assert calc.set_census(3, "10").required_staff == 4     # CNA ceil(10/3)
    assert calc.set_census(4, "51").required_staff == 2     # UC ceil(51/50)


def test_zero_census_needs_zero_staff():
    _, calc = _calc()
    row = calc.set_census(3, "0")
    assert row.census == 0
    assert row.required_staff == 0


def test_clearing_census_resets_required_staff():
    _, calc = _calc()
    calc.set_census(3, "10")
    row = calc.set_census(3, "")
    assert row.census is None
    assert row.required_staff is None


@pytest.mark.parametrize("raw", ["abc", "-3", "2.5", "1e3", "9" * 5000])
def test_invalid_census_rejected_and_row_unchanged(raw):
    _, calc = _calc()
    calc.set_census(3, "10")
    with pytest.raises(InvalidNumber):
        calc.set_census(3, raw)
    assert calc.row(3).census == 10
    assert calc.row(3).required_staff == 4


def test_parse_census_trims_whitespace():
    assert parse_census(" 12 ") == 12
    assert parse_census("   ") is None
    assert parse_census(None) is None


def test_set_census_unknown_row():
    _, calc = _calc()
    with pytest.raises(KeyError):
        calc.set_census(42, "3")


def test_adding_staff_type_regenerates_rows():
    reg = StaffTypeRegistry(seed=DEFAULT_STAFF_TYPES[:4])
    calc = StaffingCalculator(reg)
    reg.add("Medical Assistant", "MA")

    rows = calc.rows()
    assert len(rows) == len(reg.list()) == 5
    new_row = rows[-1]
    assert new_row.staff_type_id == 5
    assert new_row.ratio == "1:4"
    assert new_row.census is None


def test_unknown_code_gets_fallback_ratio():
    reg, calc = _calc()
    reg.add("Respiratory Therapist", "RT")
    assert calc.row(6).ratio == "1:4"


def test_regeneration_carries_census_forward_by_id():
    reg, calc = _calc(carry_forward=True)
    calc.set_census(3, "10")
    reg.add("Respiratory Therapist", "RT")
    assert calc.row(3).census == 10
    assert calc.row(3).required_staff == 4


def test_regeneration_resets_census_when_carry_forward_off():
    reg, calc = _calc(carry_forward=False)
    calc.set_census(3, "10")
    reg.add("Respiratory Therapist", "RT")
    assert calc.row(3).census is None
    assert calc.row(3).required_staff is None


def test_update_recomputes_with_new_code_ratio():
    """Changing a code re-resolves its ratio; the entered census survives."""
    reg, calc = _calc()
    calc.set_census(1, "9")          # RN 1:1 -> 9
    assert calc.row(1).required_staff == 9
    reg.update(1, "Registered Nurse", "RNC")   # not in table -> fallback 1:4
    assert calc.row(1).title == "RNC"
    assert calc.row(1).ratio == "1:4"
    assert calc.row(1).required_staff == 3     # ceil(9/4)


def test_add_row_is_calculator_local():
    reg, calc = _calc()
    row = calc.add_row("RT", "1:5")
    assert row.staff_type_id == 6
    assert row.scratch
    assert row.census is None
    assert len(reg.list()) == 5
    assert calc.set_census(6, "11").required_staff == 3     # ceil(11/5)


@pytest.mark.parametrize("ratio", ["abc", "1:0", "1/3"])
def test_add_row_rejects_bad_ratio(ratio):
    _, calc = _calc()
    with pytest.raises(InvalidFormat):
        calc.add_row("RT", ratio)
    assert len(calc.rows()) == 5


def test_add_row_rejects_missing_and_duplicate():
    _, calc = _calc()
    with pytest.raises(MissingField):
        calc.add_row("", "1:3")
    with pytest.raises(MissingField):
        calc.add_row("RT", "")
    with pytest.raises(DuplicateEntry):
        calc.add_row("cna", "1:3")


def test_scratch_rows_dropped_on_registry_change():
    reg, calc = _calc()
    calc.add_row("RT", "1:5")
    reg.add("Phlebotomist", "PHL")
    assert _ids(calc) == [1, 2, 3, 4, 5, 6]
    assert not any(r.scratch for r in calc.rows())
    assert calc.row(6).title == "PHL"


def test_sort_full_cycle_restores_registry_order():
    _, calc = _calc()
    original = _ids(calc)

    assert calc.toggle_sort("title").direction == "asc"
    assert [r.title for r in calc.rows()] == ["CNA", "LPN", "MA", "RN", "UC"]
    assert calc.toggle_sort("title").direction == "desc"
    assert [r.title for r in calc.rows()] == ["UC", "RN", "MA", "LPN", "CNA"]
    assert calc.toggle_sort("title").direction is None
    assert _ids(calc) == original


def test_sort_is_stable_and_absent_values_sort_last():
    _, calc = _calc()
    calc.set_census(2, "4")      # LPN -> 2
    calc.set_census(4, "20")     # UC -> 1
    calc.set_census(5, "8")      # MA -> 2

    calc.toggle_sort("required_staff")
    # ties (LPN, MA) keep registry order; absent rows follow in registry order
    assert _ids(calc) == [4, 2, 5, 1, 3]


def test_switching_column_starts_ascending():
    _, calc = _calc()
    calc.toggle_sort("title")
    calc.toggle_sort("title")
    assert calc.toggle_sort("staff_type_id").direction == "asc"
    assert _ids(calc) == [1, 2, 3, 4, 5]


def test_sort_reset_keeps_census_and_scratch_rows():
    _, calc = _calc()
    calc.set_census(1, "3")
    calc.add_row("RT", "1:5")
    for _ in range(3):
        calc.toggle_sort("ratio")
    assert _ids(calc) == [1, 2, 3, 4, 5, 6]
    assert calc.row(1).required_staff == 3


def test_sort_unknown_column():
    _, calc = _calc()
    with pytest.raises(ValueError):
        calc.toggle_sort("Hourly_Pay")


def test_calculator_notifies_subscribers():
    reg, calc = _calc()
    seen = []
    calc.subscribe(lambda c: seen.append(len(c.rows())))
    calc.set_census(1, "2")
    reg.add("Respiratory Therapist", "RT")
    assert seen == [5, 6]


def test_sort_descending_ties_keep_order_and_absent_values_lead():
    _, calc = _calc()
    calc.set_census(2, "4")      # LPN -> 2
    calc.set_census(4, "20")     # UC -> 1
    calc.set_census(5, "8")      # MA -> 2

    calc.toggle_sort("required_staff")
    calc.toggle_sort("required_staff")
    # absent rows first, then LPN/MA tie in registry order, then UC
    assert _ids(calc) == [1, 3, 2, 5, 4]


def test_detached_calculator_ignores_registry_changes():
    reg, calc = _calc()
    calc.detach()
    reg.add("Respiratory Therapist", "RT")
    assert len(reg.list()) == 6
    assert len(calc.rows()) == 5
