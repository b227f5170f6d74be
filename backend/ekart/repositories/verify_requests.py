import time
from typing import Optional, Dict, Any
from firebase_admin import firestore
from ekart.config import collection

COL = "verify_requests"

def now_ts() -> int:
    return int(time.time())

def get(db, uid: str) -> Optional[Dict[str, Any]]:
    doc = db.collection(collection(COL)).document(uid).get()
    return doc.to_dict() if doc.exists else None

def create_or_replace(db, uid: str, code_hash: str, ttl_seconds: int) -> None:
    db.collection(collection(COL)).document(uid).set({
        "uid": uid,
        "code_hash": code_hash,
        "requested_at": firestore.SERVER_TIMESTAMP,
        "expires_at_unix": now_ts() + ttl_seconds,
        "consumed": False,
        "attempts": 0,
    })

def increment_attempt(db, uid: str) -> None:
    db.collection(collection(COL)).document(uid).update({"attempts": firestore.Increment(1)})

def consume(db, uid: str) -> None:
    db.collection(collection(COL)).document(uid).update({
        "consumed": True,
        "consumed_at": firestore.SERVER_TIMESTAMP
    })

def delete(db, uid: str) -> None:
    db.collection(collection(COL)).document(uid).delete()
