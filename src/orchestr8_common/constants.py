"""Shared constants for the Orchestr8 ecosystem."""

from pathlib import Path

# Reverse proxy
BASE_DOMAIN = "iiitkota.ac.in"
NGINX_CONFIG_PATH = Path("/etc/nginx/sites-available/api-managed.conf")
NGINX_SSL_SNIPPET = "snippets/ssl-cname-iiitkota.conf"
BACKUP_DIR = Path("./backups")

NGINX_TEST_COMMAND = ("sudo", "nginx", "-t")
NGINX_RELOAD_COMMAND = ("sudo", "systemctl", "reload", "nginx")
COMMAND_TIMEOUT = 30.0

# Audit / logging
LOG_DIR = Path("/var/log/orchestr8")
AUDIT_JSONL_PATH = LOG_DIR / "audit.jsonl"
AUDIT_DB_PATH = Path("/var/lib/orchestr8/audit.db")

# NGINX defaults
DEFAULT_CLIENT_MAX_BODY_SIZE = "10M"
BODY_SIZE_NOT_SET = "N/A"
MANAGED_TAG = "Managed by Orchestr8"
