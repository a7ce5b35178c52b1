import time
import liquidvote_jax as lv
import jax

def benchmark():
    params_list = [
        {'n': 10, 'p': 3, 'label': 'ring n=10'},
        {'n': 50, 'p': 5, 'label': 'ring n=50'},
        {'n': 200, 'p': 5, 'label': 'ring n=200'},
        {'n': 500, 'p': 10, 'label': 'ring n=500'},
    ]
    solvers = ["power_series", "fundamental_matrix"]

    results = []

    # Get JAX device info
    devices = jax.devices()
    default_device = devices[0] if devices else None
    device_info = f"{default_device.platform.upper()}" if default_device else "Unknown"

    print(f"\n{'='*78}")
    print(f"Delegation Resolution Benchmark")
    print(f"{'='*78}")
    print(f"Device: {device_info} ({default_device})")
    print(f"JAX version: {jax.__version__}")
    print(f"Power series iterations: {lv.ITERATIONS}")
    print(f"{'='*78}\n")

    print(f"{'Test Case':<14} | {'Solver':<20} | {'Size':<6} | {'Time (s)':<10} | {'Device':<8}")
    print("-" * 78)

    for params in params_list:
        n = params['n']
        p = params['p']
        label = params['label']
        size = n + p

        for solver in solvers:
            model = lv.delegation_ring(n=n, p=p, leak=0.05)
            try:
                start = time.time()
                model.analyze(solver=solver)
                model.vote_totals.block_until_ready()
                solve_time = time.time() - start

                print(f"{label:<14} | {solver:<20} | {size:<6} | {solve_time:<10.4f} | {device_info:<8}")

                results.append({
                    "Test Case": label,
                    "Solver": solver,
                    "Size": size,
                    "Time (s)": f"{solve_time:.4f}",
                    "Total": float(model.vote_totals.sum())
                })

            except Exception as e:
                print(f"{label:<14} | {solver:<20} | {size:<6} | ERROR: {str(e)}")
                results.append({
                    "Test Case": label,
                    "Solver": solver,
                    "Size": size,
                    "Time (s)": "ERROR",
                    "Total": None
                })

    # Print summary
    print("\n\nResults Summary:")
    print("=" * 78)
    for r in results:
        print(f"Test Case: {r['Test Case']} ({r['Solver']})")
        print(f"  Size: {r['Size']} | Time: {r['Time (s)']} | Absorbed votes: {r['Total']}")
        print()

if __name__ == "__main__":
    benchmark()
