"""mdsel-claude: mdsel selector tools and Read reminders for coding agents."""

__version__ = "1.0.0"
