"""Two-party ECDSA key generation and signing: party one and party two."""