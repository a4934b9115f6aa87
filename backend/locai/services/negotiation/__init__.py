"""Negotiation engine — dynamic discounts for the booking agent.

Modules:
    config            Immutable settings value and the built-in presets
    settings_loader   Tenant settings lookup, defaults fallback, cache, writes
    rule_evaluator    First-match strategy selection with ceiling and price floor
    combinator        Discount opportunities and ranked stacked combinations
    message_composer  Guest-facing pitch templates
    tip_generator     Coaching tips for the negotiator
    discount_engine   Orchestrates the two discount operations

Pipeline:
    SettingsLoader → evaluate_discount → compose_discount_message
    SettingsLoader → build_opportunities → calculate_best_combinations
    → generate_negotiation_tips
"""
