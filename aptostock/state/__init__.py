"""
AptoStock – State
===================
Estado en memoria de la sesión con snapshot persistente:

- BalanceLedger: saldos USDA / TLSA / CRCL
- PoolLedger:    reservas de los pools AMM
- PriceHistory:  puntos de precio por token (velas derivadas)
- SnapshotStore: frontera de persistencia (blobs JSON)
"""
