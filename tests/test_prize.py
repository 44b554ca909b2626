from __future__ import annotations

import json

from prize import (
    FALLBACK_CATEGORY,
    FALLBACK_NAME,
    GUARANTEED_FALLBACK_CATEGORY,
    GUARANTEED_FALLBACK_NAME,
    PrizeCategory,
    PrizeResolver,
    PrizeTable,
    SubPrize,
    create_default_prize_table,
    load_prize_table,
)


def test_draw_one_walks_categories_in_order(two_tier_table, scripted_random):
    resolver = PrizeResolver(two_tier_table, rng=scripted_random(rolls=[0.05, 0.9]))
    prize = resolver.draw_one()

    # 0.05 lands exactly on the first boundary, which is inclusive.
    assert prize.category == "top"
    assert prize.name == "B"
    assert prize.is_special is True
    assert prize.is_top_prize is True
    assert prize.is_guaranteed is False


def test_draw_one_ignores_sub_prize_weights(scripted_random):
    table = PrizeTable(
        prize_categories=[
            PrizeCategory(
                name="c",
                probability=1.0,
                sub_prizes=[
                    SubPrize(name="heavy", probability=0.99),
                    SubPrize(name="light", probability=0.01),
                ],
            )
        ]
    )
    resolver = PrizeResolver(table, rng=scripted_random(rolls=[0.1, 0.6]))

    # With equal shares a sub roll of 0.6 falls in the second half.
    assert resolver.draw_one().name == "light"


def test_draw_one_returns_fallback_when_probabilities_fall_short(scripted_random):
    table = PrizeTable(
        prize_categories=[PrizeCategory(name="c", probability=0.3, is_special=True)]
    )
    prize = PrizeResolver(table, rng=scripted_random(rolls=[0.7])).draw_one()

    assert prize.category == FALLBACK_CATEGORY
    assert prize.name == FALLBACK_NAME
    assert prize.is_special is False


def test_draw_one_without_sub_prizes_uses_category_name(scripted_random):
    table = PrizeTable(prize_categories=[PrizeCategory(name="bare", probability=1.0)])
    prize = PrizeResolver(table, rng=scripted_random(rolls=[0.2])).draw_one()

    assert prize.category == "bare"
    assert prize.name == "bare"


def test_draw_one_falls_back_to_first_sub_prize_on_rounding(scripted_random):
    # Ten shares of 0.1 add up to just under 1.0.
    table = PrizeTable(
        prize_categories=[
            PrizeCategory(
                name="c",
                probability=1.0,
                sub_prizes=[SubPrize(name=f"s{i}") for i in range(10)],
            )
        ]
    )
    prize = PrizeResolver(table, rng=scripted_random(rolls=[0.5, 1.0])).draw_one()

    assert prize.name == "s0"


def test_draw_guaranteed_picks_from_all_top_categories(scripted_random):
    table = PrizeTable(
        prize_categories=[
            PrizeCategory(
                name="top1",
                probability=0.02,
                is_top_prize=True,
                sub_prizes=[SubPrize(name="A")],
            ),
            PrizeCategory(name="mid", probability=0.08, sub_prizes=[SubPrize(name="M")]),
            PrizeCategory(
                name="top2",
                probability=0.03,
                is_top_prize=True,
                sub_prizes=[SubPrize(name="B"), SubPrize(name="C")],
            ),
        ]
    )
    prize = PrizeResolver(table, rng=scripted_random(indexes=[2])).draw_guaranteed()

    assert prize.category == "top2"
    assert prize.name == "C"
    assert prize.is_special and prize.is_guaranteed and prize.is_top_prize


def test_draw_guaranteed_without_top_prizes_uses_fallback(log_messages):
    table = PrizeTable(
        prize_categories=[
            PrizeCategory(name="common", probability=1.0, sub_prizes=[SubPrize(name="x")])
        ]
    )
    prize = PrizeResolver(table).draw_guaranteed()

    assert prize.category == GUARANTEED_FALLBACK_CATEGORY
    assert prize.name == GUARANTEED_FALLBACK_NAME
    assert prize.is_special and prize.is_guaranteed and prize.is_top_prize
    assert any("No top prize" in message for message in log_messages)


def test_load_prize_table_pins_guarantee_and_history_size(tmp_path):
    path = tmp_path / "lottery.json"
    path.write_text(
        json.dumps(
            {
                "prizeCategories": [
                    {"name": "only", "probability": 1.0, "isSpecial": True}
                ],
                "guarantee": {"count": 10, "prizeCategory": "only"},
                "historySize": 5,
            }
        ),
        encoding="utf-8",
    )
    table = load_prize_table(path)

    assert [c.name for c in table.prize_categories] == ["only"]
    assert table.prize_categories[0].sub_prizes == []
    assert table.guarantee.count == 90
    assert table.history_size == 180


def test_load_prize_table_keeps_default_messages_when_missing(tmp_path):
    path = tmp_path / "lottery.json"
    path.write_text(
        json.dumps({"prizeCategories": [{"name": "only", "probability": 1.0}]}),
        encoding="utf-8",
    )
    table = load_prize_table(path)

    assert table.messages == create_default_prize_table().messages


def test_load_prize_table_accepts_partial_messages(tmp_path):
    path = tmp_path / "lottery.json"
    path.write_text(
        json.dumps({"messages": {"default": "bye"}}, ensure_ascii=False),
        encoding="utf-8",
    )
    table = load_prize_table(path)

    assert table.messages.default == "bye"
    assert table.messages.no_tickets == create_default_prize_table().messages.no_tickets
    # Categories were not supplied, so the defaults stay.
    assert len(table.prize_categories) == 2


def test_load_prize_table_falls_back_on_missing_file(tmp_path, log_messages):
    table = load_prize_table(tmp_path / "absent.json")

    assert table == create_default_prize_table()
    assert any("Using default prize table" in message for message in log_messages)


def test_load_prize_table_falls_back_on_invalid_payload(tmp_path):
    path = tmp_path / "lottery.json"
    path.write_text(
        json.dumps({"prizeCategories": [{"name": "x", "probability": 2.0}]}),
        encoding="utf-8",
    )

    assert load_prize_table(path) == create_default_prize_table()


def test_load_prize_table_falls_back_on_broken_json(tmp_path):
    path = tmp_path / "lottery.json"
    path.write_text("{not json", encoding="utf-8")

    assert load_prize_table(path) == create_default_prize_table()


def test_load_prize_table_warns_on_uneven_distribution(tmp_path, log_messages):
    path = tmp_path / "lottery.json"
    path.write_text(
        json.dumps({"prizeCategories": [{"name": "x", "probability": 0.4}]}),
        encoding="utf-8",
    )
    table = load_prize_table(path)

    assert table.prize_categories[0].probability == 0.4
    assert any("sum to 0.4000" in message for message in log_messages)


def test_default_table_distribution_is_valid():
    table = create_default_prize_table()

    assert table.validate_distribution()
    assert table.guarantee.prize_category == "一等奖"
    assert [name for name, _ in table.top_prize_pool()] == ["一等奖"] * 3
