"""Example: Bell pair on a tiny-qreg register."""
import sys
sys.path.insert(0, 'src')

from tiny_qreg import StatevectorEngine, probabilities_ascii, render_bar_chart

print("=" * 50)
print("tiny-qreg: Bell State Example")
print("=" * 50)

eng = StatevectorEngine(2)
eng.apply_h(0)
eng.apply_controlled_x(0, 1)

print()
print(probabilities_ascii(eng))
print()
print(render_bar_chart(eng, led_count=4))

result = eng.measure(0)
print(f"\nMeasured q{result.qubit} -> {result.outcome}")
print(f"P(q1 = 1) after collapse: {eng.probability_qubit_is_one(1):.3f}")
print("\nExpected: q1 follows q0 (entangled!)")
