# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest

from fastapi import HTTPException

from healthtrack.auth.security import create_access_token, decode_token, hash_password, verify_password


class TestPasswordHashing(unittest.TestCase):
    def test_hash_verifies_and_is_salted(self) -> None:
        first = hash_password("correct horse")
        second = hash_password("correct horse")
        self.assertNotEqual(first, second)
        self.assertTrue(first.startswith("pbkdf2_sha256$"))
        self.assertTrue(verify_password("correct horse", first))
        self.assertFalse(verify_password("wrong horse", first))

    def test_malformed_hash_is_rejected(self) -> None:
        self.assertFalse(verify_password("x", "not-a-hash"))
        self.assertFalse(verify_password("x", "md5$1$abc$def"))


class TestTokens(unittest.TestCase):
    def test_round_trip(self) -> None:
        claims = decode_token(create_access_token(user_id="u-1", email="a@example.com"))
        self.assertEqual(claims["sub"], "u-1")
        self.assertEqual(claims["email"], "a@example.com")
        self.assertGreater(claims["exp"], claims["iat"])

    def test_tampered_token_is_401(self) -> None:
        token = create_access_token(user_id="u-1", email="a@example.com")
        header, payload, signature = token.split(".")
        forged = create_access_token(user_id="u-2", email="b@example.com").split(".")[1]
        for bad in (f"{header}.{forged}.{signature}", "garbage", f"{header}.{payload}.", "a.b.c.d"):
            with self.assertRaises(HTTPException) as ctx:
                decode_token(bad)
            self.assertEqual(ctx.exception.status_code, 401)


if __name__ == "__main__":
    unittest.main()
