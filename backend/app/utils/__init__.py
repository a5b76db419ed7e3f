from app.utils.security import hash_password, verify_password, create_tokens, decode_token

__all__ = ["hash_password", "verify_password", "create_tokens", "decode_token"]
