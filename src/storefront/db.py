import logging
from supabase import create_client, Client
from .config import SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY, SUPABASE_ANON_KEY

logger = logging.getLogger(__name__)


def get_client() -> Client:
    # Service role: bypasses row-level security, keep to catalogue reads,
    # token checks and back-office work
    return create_client(SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY)


def _public_key() -> str:
    if not SUPABASE_ANON_KEY:
        logger.warning("SUPABASE_ANON_KEY not set; falling back to the service role key")
        return SUPABASE_SERVICE_ROLE_KEY
    return SUPABASE_ANON_KEY


def get_auth_client() -> Client:
    # Auth flows run with the public key so sessions belong to the end user
    return create_client(SUPABASE_URL, _public_key())


def get_user_client(access_token: str) -> Client:
    # Table calls carry the caller's JWT, so row-level security applies
    sb = create_client(SUPABASE_URL, _public_key())
    sb.postgrest.auth(access_token)
    return sb
