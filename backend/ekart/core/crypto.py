import hmac, hashlib, secrets
from ekart.config import settings

def verify_secret() -> str:
    return settings.verify_code_secret or settings.firebase_web_api_key

def gen_numeric_code(n: int) -> str:
    return str(secrets.randbelow(10 ** n)).zfill(n)

def hmac_hash(uid: str, code: str) -> str:
    key = verify_secret().encode("utf-8")
    msg = f"{uid}:{code}".encode("utf-8")
    return hmac.new(key, msg, hashlib.sha256).hexdigest()

def codes_match(uid: str, code: str, code_hash: str) -> bool:
    return hmac.compare_digest(hmac_hash(uid, code), code_hash or "")
