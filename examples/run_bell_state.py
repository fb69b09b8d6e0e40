"""Example: Build and evaluate a Bell state with qcomposer."""
from qcomposer import (
    StatevectorSimulator,
    add_gate,
    default_circuit,
    to_qiskit,
)

print("=" * 50)
print("qcomposer: Bell State Example")
print("=" * 50)

qc = default_circuit(2, 4)
qc = add_gate(qc, "H", 0, column=0)
qc = add_gate(qc, "CNOT", (0, 1), column=1)
qc = add_gate(qc, "MEASURE", 0, column=2)
qc = add_gate(qc, "MEASURE", 1, column=2)

result = StatevectorSimulator().run(qc)
print(result.summary())

print("\nState vector:")
print(result.pretty())

print("\nProbabilities:")
for state, p in result.probabilities().items():
    print(f"  |{state}⟩: {100 * p:5.1f}%")

print("\nBloch vector of q0 (marginal):", result.bloch(0))

print("\nQiskit export:")
print(to_qiskit(qc))

print("\nExpected: 50% |00⟩ and 50% |11⟩ (entangled!)")
