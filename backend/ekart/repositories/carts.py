from typing import Dict, Any
from ekart.config import collection

COL = "carts"

def ref(db, buyer_id: str):
    # document id == buyer uid: one cart per buyer
    return db.collection(collection(COL)).document(buyer_id)

def load(db, buyer_id: str) -> Dict[str, Any]:
    snap = ref(db, buyer_id).get()
    if snap.exists:
        data = snap.to_dict() or {}
        data["items"] = data.get("items", [])
        return data
    return {"buyer_id": buyer_id, "items": []}

def exists(db, buyer_id: str) -> bool:
    return ref(db, buyer_id).get().exists

def save(db, buyer_id: str, cart: Dict[str, Any]) -> None:
    ref(db, buyer_id).set({"buyer_id": buyer_id, "items": cart.get("items", [])})

def clear(db, buyer_id: str) -> None:
    save(db, buyer_id, {"items": []})

def delete(db, buyer_id: str) -> None:
    ref(db, buyer_id).delete()
