"""WHOIS wire transports."""
