"""Generate the VAPID key pair used to sign Web Push requests."""
from cryptography.hazmat.primitives import serialization
from py_vapid import Vapid01
from py_vapid.utils import b64urlencode


def generate_keys():
    vapid = Vapid01()
    vapid.generate_keys()

    public_key = vapid.public_key.public_bytes(
        serialization.Encoding.X962,
        serialization.PublicFormat.UncompressedPoint,
    )
    private_key = vapid.private_key.private_numbers().private_value.to_bytes(32, "big")
    return b64urlencode(public_key), b64urlencode(private_key)


if __name__ == "__main__":
    public_key, private_key = generate_keys()
    print("Add these variables to your environment:\n")
    print(f"VAPID_PUBLIC_KEY={public_key}")
    print(f"VAPID_PRIVATE_KEY={private_key}")
    print("VAPID_SUBJECT=mailto:admin@example.com")
    print("\nKeep the private key secret.")
