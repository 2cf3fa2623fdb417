"""Oracle-style helpers: REMAINDER, NVARCHAR2 length rules, business-day
calendars, directory access rules, typed message pipes and settings."""

__version__ = "0.1.0"