"""
Values shared by the test modules.
"""

SECRET_KEY = b"\x01" * 32
SECRET_KEY_ADDRESS = "0x1a642f0e3c3af545e7acbd38b07251b3990914f1"

EIP155_RECIPIENT = "0x3535353535353535353535353535353535353535"
