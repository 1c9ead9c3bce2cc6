"""Reference games used by tests and benchmarks."""

from __future__ import annotations

from typing import Dict, Final


KING_HUNT: Final = """1.e4 e5 2.Nf3 f6 3.Nxe5 fxe5 4.Qh5+ Ke7 5.Qxe5+ Kf7 6.Bc4+ d5 7.Bxd5+
Kg6 8.h4 h5 9.Bxb7 Bxb7 10.Qf5+ Kh6 11.d4+ g5 12.Qf7 Qe7 13.hxg5+ Qxg5
14.Rxh5#"""

KASPAROV_TOPALOV: Final = """1. e4 d6 2. d4 Nf6 3. Nc3 g6 4. Be3 Bg7 5. Qd2 c6 6. f3 b5 7. Nge2 Nbd7 8. Bh6
Bxh6 9. Qxh6 Bb7 10. a3 e5 11. O-O-O Qe7 12. Kb1 a6 13. Nc1 O-O-O 14. Nb3 exd4
15. Rxd4 c5 16. Rd1 Nb6 17. g3 Kb8 18. Na5 Ba8 19. Bh3 d5 20. Qf4+ Ka7 21. Rhe1
d4 22. Nd5 Nbxd5 23. exd5 Qd6 24. Rxd4 cxd4 25. Re7+ Kb6 26. Qxd4+ Kxa5 27. b4+
Ka4 28. Qc3 Qxd5 29. Ra7 Bb7 30. Rxb7 Qc4 31. Qxf6 Kxa3 32. Qxa6+ Kxb4 33. c3+
Kxc3 34. Qa1+ Kd2 35. Qb2+ Kd1 36. Bf1 Rd2 37. Rd7 Rxd7 38. Bxc4 bxc4 39. Qxh8
Rd3 40. Qa8 c3 41. Qa4+ Ke1 42. f4 f5 43. Kc1 Rd2 44. Qa7"""

# Contains a double step answered by an en passant capture (12. hxg6).
SCANDINAVIAN: Final = """1. e4 d5 2. exd5 Qxd5 3. Nc3 Qa5 4. d3 c6 5. Bd2 Qc7 6. Qe2 Bd7 7. O-O-O Na6 8.
Nf3 O-O-O 9. h4 Nf6 10. h5 e6 11. Ne5 g5 12. hxg6 hxg6 13. Rxh8 Bg7 14. Rxd8+
Kxd8 15. Nxf7+ Kc8 16. Qxe6 Bxe6 17. Ne4 Nxe4 18. dxe4 Bxf7 19. Bxa6 bxa6 20.
Bf4 Qxf4+ 21. Kb1"""

GAMES: Final[Dict[str, str]] = {
    "king_hunt": KING_HUNT,
    "kasparov_topalov": KASPAROV_TOPALOV,
    "scandinavian": SCANDINAVIAN,
}
