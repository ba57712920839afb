"""Rate resolution core.

Modules:
    types              Frozen value records, enums and money helpers
    errors             RateError and its coded subclasses
    ports              RateStore / InventoryStore storage interfaces
    season_calendar    Date -> season lookup over sorted intervals
    promotion_matcher  Booking window, stay window and daily-rate coverage checks
    resolver           Per-night rate selection (promotion, then season)
    aggregator         Subtotal, benefits, extras and grand total
    inventory_ledger   All-or-nothing reserve / release per stay
    quote_service      Boundary operations over the pieces above
    memory             In-memory store for tests and local runs
    sql_store          SQLAlchemy-backed stores

Pipeline:
    PromotionMatcher -> SeasonCalendar -> RateResolver -> PriceAggregator
    (InventoryLedger on booking confirmation)
"""
