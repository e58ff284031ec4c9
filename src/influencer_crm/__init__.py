"""Influencer CRM service: influencers, campaigns, deals, orders and contracts."""
