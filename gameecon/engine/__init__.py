"""
GameEcon Calculation Engines.

Components:
- achievement: AGI milestone probability, attempt resolution, consequences
- alignment: Alignment tax, stance trade-off, capability explosion, disruption
- credit: Credit scoring, interest rates, amortization, loan approval
- investment: Return-rate sampling and maturity scheduling
- marketplace: Compute/model pricing, SLA refunds, reputation, escrow
- healthcare: Trial timelines, research risk, drug success, patent value
- politics: Elections, bill support, donors, districts, outreach, campaigns
- emissions: Scope 1/2/3 roll-up and regulatory threshold checks

Engines are independent of one another and hold no mutable state beyond
their injected random source and clock.
"""
