PASSPHRASE = "secret"
CREATED = 1600000000
