# quantdesk

Building blocks for a small quantitative trading desk.

## Modules

- `quantdesk.symbols`: the compact contract identifier. `Symbol` holds a
  `ContractType`, an object code (`opt`), an exchange number and a 20-bit `code`;
  for options `year`, `month` and `price` read the parts of `code`.
  `Symbol.pack()` gives the unsigned 64-bit form and `unpack_symbol()` reverses it.
  `ExchangeName` lists the exchanges; `YEAR_DAY` is the number of trading days in a year.
- `quantdesk.ctp_symbol`: `parse_ctp_symbol()` turns futures and option instrument
  names such as `ta510` or `SR505C5000` into a `Symbol`; `ctp_object_name()` maps an
  object code back to its name and `get_exchange_name()` gives the exchange of a name.
- `quantdesk.agent`: `hold_from_score()` maps a classifier probability to 1 (above
  0.75), -1 (below 0.25) or 0; `signals_from_scores()` pairs symbols with `Signal`s.
- `quantdesk.noise`: `gauss_noise()` (and the identical `gauss_noise_simd()`)
  returns a list of normally distributed samples.
- `quantdesk.emd`: `find_extrema()` returns an `Extrema` with the indices of strict
  interior local maxima and minima.
- `quantdesk.convert_utf`: strict or lenient conversion between UTF-8 bytes and
  UTF-16 / UTF-32 code unit sequences (`utf8_to_utf16`, `utf16_to_utf8`,
  `utf32_to_utf16`, `utf16_to_utf32`, `utf32_to_utf8`, `utf8_to_utf32`). Each returns a
  `Conversion` with a `ConversionResult`, the output produced and the number of source
  units consumed. `is_legal_utf8_sequence()` checks one UTF-8 sequence.
- `quantdesk.stock`: `Stock` reads names from `A_code.csv` (`load_info`), takes daily
  rows (`add_daily`) and computes the mean and standard deviation of daily returns
  per code (`calculate_return_and_std`, `get_return_std`). Unknown codes raise
  `StockNotFoundError`.
- `quantdesk.broker`: `Broker` simulates filling stock orders around the middle of
  their price levels with a normally distributed slip (`simulate_stock_match`), keeps
  filled orders (`record`, `history_json`) and daily predictions per symbol
  (`predict_with_days`, `get_next_prediction`, `get_prediction`). `BrokerStore` keeps
  named values as CBOR in an LMDB file; `Broker.flush()` and `Broker.restore()` write
  and read history, principal and predictions.
- `quantdesk.sim_exchange`: `StockSimulation` loads per-symbol daily CSV files
  (`<code>_<anything>.csv`, header then date, open, close), limited by a
  `QuoteFilter`, and `query_quotes()` yields them as `Quote` records.

## Install

```
pip install .
```

## Example

```python
from quantdesk.ctp_symbol import parse_ctp_symbol
from quantdesk.agent import signals_from_scores

sym = parse_ctp_symbol("SR505C5000")
print(sym.type, sym.exchange, sym.year, sym.month, sym.price)

for signal in signals_from_scores(["000001", "600000"], [0.9, 0.1]):
    print(signal)
```

```python
from quantdesk.broker import Broker, BrokerStore, Order, OrderLevel

broker = Broker(principal=100_000, slip=0.01)
order = Order(number=2, levels=(OrderLevel(time=0, price=10.0),))
deal = broker.simulate_stock_match(100_000, order)
broker.record("000001", order, deal)

with BrokerStore("broker.mdb") as store:
    broker.flush(store)
```

## What it does not do

The package has no command-line program, no HTTP server and no connection to a
live exchange or quote feed: quotes come only from local CSV files and orders are
only simulated. It does not train or run prediction models; `quantdesk.agent` only
turns scores you already have into signals.

## Tests

```
pip install .[test]
pytest
```