"""HTTP types — request view, response builder, headers, cookies, body decoding."""
