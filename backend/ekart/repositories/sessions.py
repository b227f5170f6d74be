from typing import Optional, Dict, Any
from firebase_admin import firestore
from ekart.config import collection

COL = "sessions"

def get(db, uid: str) -> Optional[Dict[str, Any]]:
    doc = db.collection(collection(COL)).document(uid).get()
    return doc.to_dict() if doc.exists else None

def create_or_replace(db, uid: str) -> None:
    # one live session per user; a new login replaces the old one
    db.collection(collection(COL)).document(uid).set({
        "uid": uid,
        "created_at": firestore.SERVER_TIMESTAMP,
    })

def delete(db, uid: str) -> None:
    db.collection(collection(COL)).document(uid).delete()
