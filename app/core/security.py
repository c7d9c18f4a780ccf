import hashlib
import bcrypt

# bcrypt only reads the first 72 bytes; pre-hash so long passwords stay distinct
def _digest(password: str) -> bytes:
    return hashlib.sha256(password.encode("utf-8")).digest()

def hash_password(password:str) -> str:
    hashed = bcrypt.hashpw(_digest(password), bcrypt.gensalt())
    return hashed.decode()

def verify_password(password:str, hashed_password:str) -> bool:
    try:
        return bcrypt.checkpw(_digest(password), hashed_password.encode())
    except ValueError:
        # malformed hash in the store
        return False
