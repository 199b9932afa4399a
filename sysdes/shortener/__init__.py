"""URL shortener with short-code generation, user accounts and click analytics."""