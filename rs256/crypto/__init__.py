"""RSA key decoding, the PKCS#1 v1.5 engine and signer/verifier factories."""
